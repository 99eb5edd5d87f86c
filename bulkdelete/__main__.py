"""Main entry point when executing bulkdelete as a package.

This allows running the package using python -m bulkdelete.
"""

from bulkdelete.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
