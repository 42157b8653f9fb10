"""Shared fixtures for the cloudstore tests"""

import logging
import shutil
from pathlib import Path

import pytest

from cloudstore.backends import StorageBackend


class FakeBackend(StorageBackend):
    """
    Lossless backend keeping objects as files under a directory.
    Set ``fail_with`` to make every call raise that exception.
    """

    def __init__(self, root):
        self.root = Path(root)
        self.calls = []
        self.fail_with = None

    def _check(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail_with is not None:
            raise self.fail_with

    def _object(self, container, remote):
        return self.root / container / remote

    def create_container(self, container):
        self._check("create_container", container)
        (self.root / container).mkdir(parents=True, exist_ok=True)

    def put_file(self, container, remote, fileobj, headers):
        self._check("put_file", container, remote, dict(headers))
        target = self._object(container, remote)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as out:
            shutil.copyfileobj(fileobj, out)

    def get_file(self, container, remote, fileobj):
        self._check("get_file", container, remote)
        source = self._object(container, remote)
        if not source.is_file():
            raise FileNotFoundError(f"NoSuchKey: {container}/{remote}")
        with open(source, "rb") as src:
            shutil.copyfileobj(src, fileobj)
        return {"ContentLength": source.stat().st_size, "ETag": '"fake"'}

    def delete_file(self, container, remote):
        self._check("delete_file", container, remote)
        self._object(container, remote).unlink(missing_ok=True)


@pytest.fixture
def fake_backend(tmp_path):
    """A FakeBackend storing objects under a temporary directory"""
    return FakeBackend(tmp_path / "remote")


@pytest.fixture
def amazon_config():
    """Minimal valid amazon configuration"""
    return {"container": "bucket1", "key": "k", "key_id": "id"}


@pytest.fixture
def local_file(tmp_path):
    """A small binary file to upload"""
    path = tmp_path / "local" / "source.bin"
    path.parent.mkdir()
    path.write_bytes(bytes(range(256)) * 64)
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces the root handlers; put them back"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
