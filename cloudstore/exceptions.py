"""Cloudstore Exceptions

This module contains all exception classes raised by cloudstore. Errors coming
from the storage SDK are never raised bare: each operation wraps them in its
own exception type and prefixes the message with the provider label.
"""

import enum


class ErrorKind(enum.Enum):
    """Which stage of a storage operation failed"""

    CONFIGURATION = "configuration"
    INITIALIZATION = "initialization"
    UPLOAD = "uploading"
    DOWNLOAD = "downloading"
    REMOVE = "removing"


class StorageError(Exception):
    """
    Base class for all exceptions raised by cloudstore.

    :param message: The complete, already prefixed, error message
    :param provider: Label of the provider which raised it (``AmazonClient``...)
    :param original: The underlying exception, if any

    :type message: str
    :type provider: str
    :type original: Exception
    """

    kind = None

    def __init__(self, message, provider=None, original=None):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.original = original


class ConfigurationError(StorageError):
    """
    Exception raised when a misconfiguration is detected. Always raised
    synchronously, before any connection exists.
    """

    kind = ErrorKind.CONFIGURATION


class OperationError(StorageError):
    """
    Exception raised when the storage backend reports a failure. The message
    reads ``<provider>: There was a problem with <stage>. Details: <original>``
    """

    @classmethod
    def wrap(cls, provider: str, err: Exception) -> "OperationError":
        """
        Build an instance of ``cls`` around ``err``, prefixing the message.

        :param provider: The provider label
        :param err: The exception reported by the backend
        """
        message = (
            f"{provider}: There was a problem with {cls.kind.value}. "
            f"Details: {err}"
        )
        return cls(message, provider=provider, original=err)


class InitializationError(OperationError):
    """
    Exception raised when the container cannot be created
    """

    kind = ErrorKind.INITIALIZATION


class UploadError(OperationError):
    """
    Exception raised when a local file cannot be sent to the container
    """

    kind = ErrorKind.UPLOAD


class DownloadError(OperationError):
    """
    Exception raised when a remote object cannot be fetched to a local file
    """

    kind = ErrorKind.DOWNLOAD


class RemoveError(OperationError):
    """
    Exception raised when a remote object cannot be removed
    """

    kind = ErrorKind.REMOVE


class LoggingException(StorageError):
    """
    Exception raised when logging cannot be configured properly
    """
