"""Object storage abstraction for result archives."""

from abc import ABC, abstractmethod
from typing import BinaryIO, List


class ResultsStorageClient(ABC):
    """Minimal interface over the blob store holding result archives.

    Keys returned by :meth:`list_keys` are full object keys and can be passed
    straight back to :meth:`get`.
    """

    @abstractmethod
    def list_keys(self) -> List[str]:
        """List every key under the configured path prefix.

        Raises:
            StorageUnavailableError: On transport or auth failures.
        """

    @abstractmethod
    def get(self, key: str, sink: BinaryIO) -> None:
        """Stream the object stored at *key* into *sink*.

        Raises:
            ObjectNotFoundError: If *key* does not exist.
            StorageUnavailableError: On any other failure.
        """

    @abstractmethod
    def put(self, key: str, source: BinaryIO) -> None:
        """Upload the contents of *source* to *key*."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the object stored at *key*."""
