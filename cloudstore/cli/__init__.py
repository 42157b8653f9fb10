"""Command line interface for cloudstore"""

from cloudstore.cli.main import cli

__all__ = ["cli"]
