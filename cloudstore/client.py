"""
client.py

The storage facade. :py:class:`StorageClient` exposes ``init``, ``upload``,
``download`` and ``remove`` the same way for every provider, and hands the
actual transfers to a :py:class:`~.cloudstore.backends.StorageBackend`.

Explanation of the naming used throughout:

- ``container`` - name of the cloud container (bucket)
- ``path`` - path to the file relative to the ``container``
- ``url`` - full public url to the file
"""

import functools
import logging
import posixpath
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError

from cloudstore.backends import StorageBackend
from cloudstore.config import get_storage_config
from cloudstore.constants import DEFAULT_PROVIDER, OPERATIONS
from cloudstore.exceptions import (
    ConfigurationError,
    DownloadError,
    InitializationError,
    OperationError,
    RemoveError,
    UploadError,
)
from cloudstore.providers import get_provider


@dataclass
class TransferResult:
    """
    Result of a successful upload. Every field is derived from the client
    configuration and the requested destination path, never from what the
    backend answered.

    Attributes:
        container (str): The name of the container.
        path (str): The destination path inside the container.
        filename (str): The last component of ``path``.
        url (str): The public url of the file.
    """

    container: str
    path: str
    filename: str
    url: str

    def to_dict(self) -> dict:
        return asdict(self)


class StorageClient:
    """
    Uniform storage client.

    The configuration is merged over the provider defaults and validated
    before anything else happens; an invalid configuration raises
    :py:exc:`~.cloudstore.exceptions.ConfigurationError` and no client is
    built. Then exactly one backend connection is opened, unless ``backend``
    is given.

    :param config: Storage configuration (``provider``, ``container``, ``key``,
        ``key_id``, ``headers``, ``endpoint_uri``...)
    :param backend: A ready backend, replacing the provider's own

    :type config: dict
    :type backend: :py:class:`~.cloudstore.backends.StorageBackend`
    """

    def __init__(self, config: dict, backend: Optional[StorageBackend] = None):
        self.loggit = logging.getLogger("cloudstore.client.StorageClient")
        config = dict(config or {})
        #: The :py:class:`~.cloudstore.providers.Provider` profile in use
        self.provider = get_provider(config.get("provider", DEFAULT_PROVIDER))
        #: The effective configuration, defaults applied
        self.config = self.provider.configure(config)
        if backend is None:
            try:
                backend = self.provider.create_backend(self.config)
            except (BotoCoreError, ValueError) as err:
                raise ConfigurationError(
                    f"{self.label}: There was a problem with configuration. "
                    f"Details: {err}",
                    provider=self.label,
                    original=err,
                ) from err
        #: The backend holding the one connection of this client
        self.connection = backend
        self._executor = None
        self._executor_lock = threading.Lock()
        self.loggit.info(
            "%s ready for container %s", self.label, self.config["container"]
        )

    @property
    def label(self) -> str:
        """Provider label used as error message prefix"""
        return self.provider.label

    def _fail(self, error_class, err: Exception) -> OperationError:
        wrapped = error_class.wrap(self.label, err)
        self.loggit.error(wrapped.message)
        return wrapped

    def init(self) -> None:
        """
        Create the container if it does not exist yet.

        :raises InitializationError: if the backend reports a failure
        """
        container = self.config["container"]
        self.loggit.info("Initializing container %s", container)
        try:
            self.connection.create_container(container)
        except Exception as err:
            raise self._fail(InitializationError, err) from err

    def upload(self, local_path: str, dest_path: str) -> TransferResult:
        """
        Stream ``local_path`` into the container at ``dest_path``, applying the
        configured headers. An existing object is overwritten.

        :param local_path: Readable local file
        :param dest_path: Destination path inside the container

        :rtype: :py:class:`TransferResult`

        :raises UploadError: if the file cannot be read or the backend fails
        """
        container = self.config["container"]
        filename = posixpath.basename(dest_path)
        self.loggit.info("Uploading %s to %s/%s", local_path, container, dest_path)
        try:
            with open(local_path, "rb") as fileobj:
                self.connection.put_file(
                    container, dest_path, fileobj, self.config["headers"]
                )
        except Exception as err:
            raise self._fail(UploadError, err) from err
        self.loggit.info("Uploaded %s/%s", container, dest_path)
        return TransferResult(
            container=container,
            path=dest_path,
            filename=filename,
            url=f"{self.config['endpoint_uri']}/{filename}",
        )

    def download(self, dest_path: str, local_path: str) -> dict:
        """
        Stream the object at ``dest_path`` into ``local_path``, which is
        created or truncated. When the transfer fails the local file may
        already hold part of the object.

        :param dest_path: Source path inside the container
        :param local_path: Local file to write

        :returns: The metadata reported by the backend, untouched
        :rtype: dict

        :raises DownloadError: if the file cannot be written or the backend fails
        """
        container = self.config["container"]
        self.loggit.info("Downloading %s/%s to %s", container, dest_path, local_path)
        try:
            with open(local_path, "wb") as fileobj:
                results = self.connection.get_file(container, dest_path, fileobj)
        except Exception as err:
            raise self._fail(DownloadError, err) from err
        self.loggit.info("Downloaded %s/%s", container, dest_path)
        return results

    def remove(self, dest_path: str) -> None:
        """
        Remove the object at ``dest_path``. There is no existence check: what
        happens for a missing object is up to the backend.

        :raises RemoveError: if the backend reports a failure
        """
        container = self.config["container"]
        self.loggit.info("Removing %s/%s", container, dest_path)
        try:
            self.connection.delete_file(container, dest_path)
        except Exception as err:
            raise self._fail(RemoveError, err) from err

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config["max_workers"],
                    thread_name_prefix="cloudstore",
                )
            return self._executor

    def _complete(self, callback: Callable, future: Future) -> None:
        if future.cancelled():
            error, result = CancelledError(), None
        elif future.exception() is not None:
            error, result = future.exception(), None
        else:
            error, result = None, future.result()
        try:
            callback(error, result)
        except Exception:
            self.loggit.exception("Completion callback raised an exception")

    def submit(self, operation: str, *args, callback: Optional[Callable] = None) -> Future:
        """
        Run ``operation`` in the background and return at once.

        The returned future resolves exactly once, with the operation result
        or its wrapped error. If ``callback`` is given it is called exactly
        once as ``callback(error, result)``: ``(None, result)`` on success and
        ``(error, None)`` on failure.

        :param operation: One of ``init``, ``upload``, ``download``, ``remove``
        :param args: Positional arguments of the operation
        :param callback: Optional completion callback

        :rtype: :py:class:`~concurrent.futures.Future`

        :raises ValueError: if ``operation`` is unknown
        """
        if operation not in OPERATIONS:
            raise ValueError(
                f"Unknown operation: {operation}. Valid operations are: {OPERATIONS}"
            )
        future = self._get_executor().submit(getattr(self, operation), *args)
        if callback is not None:
            future.add_done_callback(functools.partial(self._complete, callback))
        return future

    def close(self) -> None:
        """Wait for submitted operations, then release the worker threads"""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def storage_client_factory(config: dict, backend: Optional[StorageBackend] = None) -> StorageClient:
    """
    Build a :py:class:`StorageClient` from a full configuration, as returned by
    :py:func:`~.cloudstore.config.load_config`.

    Args:
        config (dict): Configuration holding a ``storage`` section.
        backend (StorageBackend): Optional backend replacing the provider's own.

    Raises:
        ConfigurationError: raised if the storage section is missing or invalid.

    Returns:
        StorageClient: A client for the configured provider.
    """
    return StorageClient(get_storage_config(config), backend=backend)
