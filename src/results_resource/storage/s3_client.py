"""S3-compatible storage client (AWS S3, MinIO, GCS interop endpoints)."""

import logging
from typing import BinaryIO, List, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ObjectNotFoundError, StorageUnavailableError
from .base import ResultsStorageClient

log = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
MAX_RETRIES = 10

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3StorageClient(ResultsStorageClient):
    """Result archive storage backed by an S3-compatible bucket."""

    def __init__(
        self,
        bucket_name: str,
        path_prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        aws_session_token: Optional[str] = None,
        use_v4_signing: bool = False,
    ):
        self._bucket = bucket_name
        self._prefix = path_prefix
        self._endpoint_url = endpoint_url

        # Custom endpoints default to v2 signatures unless asked otherwise.
        signature_version = "s3" if endpoint_url and not use_v4_signing else "s3v4"

        kwargs: dict = {
            "config": Config(
                region_name=region or DEFAULT_REGION,
                signature_version=signature_version,
                retries={"max_attempts": MAX_RETRIES, "mode": "standard"},
                s3={"addressing_style": "path"},
            ),
        }
        if aws_access_key_id and aws_secret_access_key:
            kwargs["aws_access_key_id"] = aws_access_key_id
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        if aws_session_token:
            kwargs["aws_session_token"] = aws_session_token
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._client = boto3.client("s3", **kwargs)

        # GCS returns InvalidArgument on multipart uploads.
        self._transfer_config: Optional[TransferConfig] = None
        if self._is_gcs_host():
            self._transfer_config = TransferConfig(multipart_threshold=5 * 1024**4)

    def list_keys(self) -> List[str]:
        keys: List[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
                for obj in page.get("Contents", []):
                    keys.append(obj["Key"])
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(
                f"unable to list bucket '{self._bucket}' with '{self._prefix}': {e}"
            ) from e
        log.debug("Listed %d object(s) in s3://%s/%s", len(keys), self._bucket, self._prefix)
        return keys

    def get(self, key: str, sink: BinaryIO) -> None:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            for chunk in response["Body"].iter_chunks():
                sink.write(chunk)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from e
            raise StorageUnavailableError(f"unable to fetch '{key}': {e}") from e
        except BotoCoreError as e:
            raise StorageUnavailableError(f"unable to fetch '{key}': {e}") from e

    def put(self, key: str, source: BinaryIO) -> None:
        kwargs: dict = {}
        if self._transfer_config is not None:
            kwargs["Config"] = self._transfer_config
        try:
            self._client.upload_fileobj(source, self._bucket, key, **kwargs)
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"unable to upload '{key}': {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailableError(f"unable to delete '{key}': {e}") from e

    def _is_gcs_host(self) -> bool:
        return bool(self._endpoint_url) and "storage.googleapis.com" in self._endpoint_url


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
