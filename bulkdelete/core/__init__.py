"""Core Application Layer: Orchestrates use cases and application logic.

Connects the domain layer with the infrastructure layer through interfaces.
Contains the bulk delete runner, the confirmation gate and the command handler.
"""
