"""Concrete implementation of the FileSystem interface for the local disk.

Uses `pathlib` for path handling and `aiofiles` for async I/O.
"""

import logging
from pathlib import Path

import aiofiles

# Domain Layer Imports
from bulkdelete.domain.interfaces.file_system import FileSystem
from bulkdelete.domain.models.common import FilePath

logger = logging.getLogger(__name__)

class LocalFileSystem(FileSystem):
    """Implementation of FileSystem for the local disk."""

    async def read_file(self, file_path: FilePath) -> str:
        """Reads file content asynchronously."""
        path = Path(file_path)
        logger.debug(f"Attempting to read file: {path}")
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            async with aiofiles.open(path, mode='r', encoding='utf-8', newline='') as f:
                content = await f.read()
            logger.debug(f"Successfully read {len(content)} characters from {path}")
            return content
        except PermissionError as e:
            logger.error(f"Permission denied reading file: {path}")
            raise PermissionError(f"Permission denied: {file_path}") from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading file {path}: {e}", exc_info=True)
            raise IOError(f"Failed to read file {file_path}: {e}") from e
