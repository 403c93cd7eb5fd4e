"""Factory for creating storage clients from the resource ``source`` block."""

import logging
import os
from typing import Any, Mapping, Optional

from ..errors import ConfigurationError
from .base import ResultsStorageClient

log = logging.getLogger(__name__)

SUPPORTED_STORAGE_TYPES = ("s3", "gcs", "azure", "local")


def create_storage_client(
    storage_type: Optional[str] = None,
    storage_config: Optional[Mapping[str, Any]] = None,
) -> ResultsStorageClient:
    """Create a ResultsStorageClient for *storage_type*.

    Settings missing from *storage_config* fall back to the usual environment
    variables of each backend (``AWS_ACCESS_KEY_ID``, ``S3_ENDPOINT_URL``,
    ``AZURE_STORAGE_CONNECTION_STRING``...).

    Args:
        storage_type: Backend type. Reads OBJECT_STORAGE_TYPE if None. Defaults to "s3".
        storage_config: Backend-specific settings from the resource source.

    Raises:
        ConfigurationError: If required configuration is missing or storage_type is unsupported.
        ImportError: If the optional dependency for the requested backend is not installed.
    """
    backend = (storage_type or os.getenv("OBJECT_STORAGE_TYPE", "s3")).lower()
    config = dict(storage_config or {})

    if backend == "s3":
        return _create_s3_client(config)
    if backend == "gcs":
        return _create_gcs_client(config)
    if backend == "azure":
        return _create_azure_client(config)
    if backend == "local":
        return _create_local_client(config)

    raise ConfigurationError(
        f"Unsupported storage type: {backend!r}. Supported: {', '.join(SUPPORTED_STORAGE_TYPES)}"
    )


def _setting(config: Mapping[str, Any], key: str, *env_vars: str) -> Optional[str]:
    value = config.get(key)
    if value:
        return value
    for env_var in env_vars:
        value = os.getenv(env_var)
        if value:
            return value
    return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _create_s3_client(config: Mapping[str, Any]) -> ResultsStorageClient:
    from .s3_client import S3StorageClient

    bucket = _setting(config, "bucket", "OBJECT_STORAGE_BUCKET_NAME", "S3_BUCKET_NAME")
    if not bucket:
        raise ConfigurationError(
            "Bucket name required: set storage_config.bucket, OBJECT_STORAGE_BUCKET_NAME or S3_BUCKET_NAME"
        )

    return S3StorageClient(
        bucket_name=bucket,
        path_prefix=config.get("path_prefix") or "",
        region=_setting(config, "region_name", "S3_REGION", "AWS_REGION"),
        endpoint_url=_setting(config, "endpoint", "S3_ENDPOINT_URL"),
        aws_access_key_id=_setting(config, "access_key_id", "AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=_setting(config, "secret_access_key", "AWS_SECRET_ACCESS_KEY"),
        aws_session_token=_setting(config, "session_token", "AWS_SESSION_TOKEN"),
        use_v4_signing=_as_bool(config.get("use_v4_signing", False)),
    )


def _create_gcs_client(config: Mapping[str, Any]) -> ResultsStorageClient:
    from .gcs_client import GcsStorageClient

    bucket = _setting(config, "bucket", "OBJECT_STORAGE_BUCKET_NAME", "GCS_BUCKET_NAME")
    if not bucket:
        raise ConfigurationError(
            "Bucket name required: set storage_config.bucket, OBJECT_STORAGE_BUCKET_NAME or GCS_BUCKET_NAME"
        )

    return GcsStorageClient(
        bucket_name=bucket,
        path_prefix=config.get("path_prefix") or "",
        project=_setting(config, "project", "GCS_PROJECT"),
        credentials_path=_setting(config, "credentials_path", "GOOGLE_APPLICATION_CREDENTIALS"),
    )


def _create_azure_client(config: Mapping[str, Any]) -> ResultsStorageClient:
    from .azure_client import AzureStorageClient

    container = _setting(config, "container", "OBJECT_STORAGE_BUCKET_NAME", "AZURE_CONTAINER_NAME")
    if not container:
        raise ConfigurationError(
            "Container name required: set storage_config.container, OBJECT_STORAGE_BUCKET_NAME "
            "or AZURE_CONTAINER_NAME"
        )

    try:
        return AzureStorageClient(
            container_name=container,
            path_prefix=config.get("path_prefix") or "",
            connection_string=_setting(config, "connection_string", "AZURE_STORAGE_CONNECTION_STRING"),
            account_name=_setting(config, "account_name", "AZURE_STORAGE_ACCOUNT_NAME"),
            account_key=_setting(config, "account_key", "AZURE_STORAGE_ACCOUNT_KEY"),
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def _create_local_client(config: Mapping[str, Any]) -> ResultsStorageClient:
    from .local_client import LocalStorageClient

    root = _setting(config, "root", "RESULTS_RESOURCE_LOCAL_ROOT")
    if not root:
        raise ConfigurationError(
            "Root directory required: set storage_config.root or RESULTS_RESOURCE_LOCAL_ROOT"
        )

    return LocalStorageClient(root=root, path_prefix=config.get("path_prefix") or "")
