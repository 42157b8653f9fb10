"""
Cloudstore - one upload/download/remove/init interface over object storage

This package wraps an object storage SDK (boto3) behind a single client whose
operations behave the same for Amazon S3, Google Cloud Storage and other
S3-compatible services.
"""

__version__ = "1.0.0"

from cloudstore.exceptions import (
    StorageError,
    ConfigurationError,
    OperationError,
    InitializationError,
    UploadError,
    DownloadError,
    RemoveError,
    LoggingException,
    ErrorKind,
)
from cloudstore.constants import (
    PROVIDERS,
    DEFAULT_PROVIDER,
    OPERATIONS,
)
from cloudstore.backends import (
    StorageBackend,
    Boto3Backend,
)
from cloudstore.providers import (
    Provider,
    get_provider,
)
from cloudstore.client import (
    StorageClient,
    TransferResult,
    storage_client_factory,
)
from cloudstore.config import (
    load_config,
    configure_logging,
)

__all__ = [
    "__version__",
    # Exceptions
    "StorageError",
    "ConfigurationError",
    "OperationError",
    "InitializationError",
    "UploadError",
    "DownloadError",
    "RemoveError",
    "LoggingException",
    "ErrorKind",
    # Constants
    "PROVIDERS",
    "DEFAULT_PROVIDER",
    "OPERATIONS",
    # Backends
    "StorageBackend",
    "Boto3Backend",
    # Providers
    "Provider",
    "get_provider",
    # Client
    "StorageClient",
    "TransferResult",
    "storage_client_factory",
    # Configuration
    "load_config",
    "configure_logging",
]
