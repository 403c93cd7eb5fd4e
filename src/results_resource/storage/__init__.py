"""Object storage clients for result archives."""

from .base import ResultsStorageClient
from .factory import SUPPORTED_STORAGE_TYPES, create_storage_client

__all__ = [
    "ResultsStorageClient",
    "SUPPORTED_STORAGE_TYPES",
    "create_storage_client",
]
