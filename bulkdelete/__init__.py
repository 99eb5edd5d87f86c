"""bulkdelete: rate-limited bulk deletion of Management API entities."""

__version__ = "1.0.0"
