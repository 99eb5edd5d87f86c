import abc

from bulkdelete.domain.models.common import FilePath


class FileSystem(abc.ABC):
    """Interface for file system operations."""

    @abc.abstractmethod
    async def read_file(self, path: FilePath) -> str:
        """Reads the content of a file.

        Args:
            path: The path to the file.

        Returns:
            The content of the file.

        Raises:
            FileNotFoundError: If the file does not exist.
            PermissionError: If the user lacks permission to read the file.
        """
        pass
