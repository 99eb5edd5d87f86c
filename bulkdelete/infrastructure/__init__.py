"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (Management API, token
endpoint, file system, console) by implementing the interfaces defined
in the domain layer.
"""
