"""Google Cloud Storage client."""

import logging
from typing import BinaryIO, List, Optional

from ..errors import ObjectNotFoundError, StorageUnavailableError
from .base import ResultsStorageClient

log = logging.getLogger(__name__)


class GcsStorageClient(ResultsStorageClient):
    """Result archive storage backed by a GCS bucket."""

    def __init__(
        self,
        bucket_name: str,
        path_prefix: str = "",
        project: Optional[str] = None,
        credentials_path: Optional[str] = None,
    ):
        try:
            from google.api_core import exceptions as gcs_exceptions
            from google.cloud import storage as gcs_storage
        except ImportError as e:
            raise ImportError(
                "google-cloud-storage is required for the gcs backend. "
                "Install it with: pip install google-cloud-storage"
            ) from e

        kwargs: dict = {}
        if project:
            kwargs["project"] = project
        if credentials_path:
            from google.oauth2 import service_account

            kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                credentials_path
            )

        client = gcs_storage.Client(**kwargs)
        self._bucket = client.bucket(bucket_name)
        self._bucket_name = bucket_name
        self._prefix = path_prefix
        self._not_found = gcs_exceptions.NotFound
        self._api_error = gcs_exceptions.GoogleAPIError

    def list_keys(self) -> List[str]:
        try:
            return [blob.name for blob in self._bucket.list_blobs(prefix=self._prefix)]
        except self._api_error as e:
            raise StorageUnavailableError(
                f"unable to list bucket '{self._bucket_name}' with '{self._prefix}': {e}"
            ) from e

    def get(self, key: str, sink: BinaryIO) -> None:
        try:
            self._bucket.blob(key).download_to_file(sink)
        except self._not_found as e:
            raise ObjectNotFoundError(key) from e
        except self._api_error as e:
            raise StorageUnavailableError(f"unable to fetch '{key}': {e}") from e

    def put(self, key: str, source: BinaryIO) -> None:
        try:
            self._bucket.blob(key).upload_from_file(source)
        except self._api_error as e:
            raise StorageUnavailableError(f"unable to upload '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._bucket.blob(key).delete()
        except self._api_error as e:
            raise StorageUnavailableError(f"unable to delete '{key}': {e}") from e
