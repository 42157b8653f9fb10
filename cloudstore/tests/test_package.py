"""
Tests for package import verification

These tests verify that the cloudstore package:
1. Can be imported successfully
2. Exposes its public API at the top level
3. Keeps boto3 inside the backends module
"""

import ast
from pathlib import Path


def test_package_imports_successfully():
    """Test that the cloudstore package can be imported"""
    import cloudstore

    assert cloudstore is not None
    assert hasattr(cloudstore, "__version__")
    assert cloudstore.__version__ == "1.0.0"


def test_submodules_import_successfully():
    """Test that all submodules can be imported"""
    import cloudstore.backends
    import cloudstore.cli
    import cloudstore.client
    import cloudstore.config
    import cloudstore.constants
    import cloudstore.defaults
    import cloudstore.exceptions
    import cloudstore.logtools
    import cloudstore.providers
    import cloudstore.validators

    assert cloudstore.cli.cli is not None


def test_public_api():
    """Test that everything in __all__ is importable"""
    import cloudstore

    for name in cloudstore.__all__:
        assert hasattr(cloudstore, name), name


def test_boto3_only_in_backends():
    """Test that only the backend module talks to boto3 directly"""
    import cloudstore

    package_dir = Path(cloudstore.__file__).parent
    offenders = []

    for py_file in package_dir.rglob("*.py"):
        if "tests" in py_file.relative_to(package_dir).parts:
            continue
        tree = ast.parse(py_file.read_text())
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom):
                names = [node.module or ""]
            else:
                continue
            if any(name == "boto3" or name.startswith("boto3.") for name in names):
                offenders.append(str(py_file.relative_to(package_dir)))

    assert offenders == ["backends.py"]
