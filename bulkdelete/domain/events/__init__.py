"""Domain Event definitions.

Represents significant occurrences while deleting entities (dispatches,
retries, terminal failures) that diagnostics may react to.
"""
