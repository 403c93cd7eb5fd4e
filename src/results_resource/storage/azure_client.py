"""Azure Blob Storage client."""

import logging
from typing import BinaryIO, List, Optional

from ..errors import ObjectNotFoundError, StorageUnavailableError
from .base import ResultsStorageClient

log = logging.getLogger(__name__)


class AzureStorageClient(ResultsStorageClient):
    """Result archive storage backed by an Azure Blob container."""

    def __init__(
        self,
        container_name: str,
        path_prefix: str = "",
        connection_string: Optional[str] = None,
        account_name: Optional[str] = None,
        account_key: Optional[str] = None,
    ):
        try:
            from azure.core.exceptions import AzureError, ResourceNotFoundError
            from azure.storage.blob import ContainerClient
        except ImportError as e:
            raise ImportError(
                "azure-storage-blob is required for the azure backend. "
                "Install it with: pip install azure-storage-blob"
            ) from e

        if connection_string:
            self._container = ContainerClient.from_connection_string(
                connection_string, container_name=container_name
            )
        elif account_name and account_key:
            account_url = f"https://{account_name}.blob.core.windows.net"
            self._container = ContainerClient(
                account_url,
                container_name=container_name,
                credential=account_key,
            )
        else:
            raise ValueError(
                "Azure storage requires either connection_string or both account_name and account_key"
            )

        self._container_name = container_name
        self._prefix = path_prefix
        self._not_found = ResourceNotFoundError
        self._azure_error = AzureError

    def list_keys(self) -> List[str]:
        try:
            return [
                blob.name
                for blob in self._container.list_blobs(name_starts_with=self._prefix or None)
            ]
        except self._azure_error as e:
            raise StorageUnavailableError(
                f"unable to list container '{self._container_name}' with '{self._prefix}': {e}"
            ) from e

    def get(self, key: str, sink: BinaryIO) -> None:
        try:
            self._container.download_blob(key).readinto(sink)
        except self._not_found as e:
            raise ObjectNotFoundError(key) from e
        except self._azure_error as e:
            raise StorageUnavailableError(f"unable to fetch '{key}': {e}") from e

    def put(self, key: str, source: BinaryIO) -> None:
        try:
            self._container.upload_blob(key, source, overwrite=True)
        except self._azure_error as e:
            raise StorageUnavailableError(f"unable to upload '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._container.delete_blob(key)
        except self._azure_error as e:
            raise StorageUnavailableError(f"unable to delete '{key}': {e}") from e
