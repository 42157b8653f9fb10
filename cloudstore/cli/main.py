"""
Cloudstore CLI entry point

This module provides a small command line front end over
:py:class:`~.cloudstore.client.StorageClient`.
"""

import json
from pathlib import Path

import click

from cloudstore import __version__
from cloudstore.client import storage_client_factory
from cloudstore.config import configure_logging, load_config
from cloudstore.constants import DEFAULT_PROVIDER, PROVIDER_S3COMPATIBLE, PROVIDERS
from cloudstore.exceptions import StorageError


# Default config file location
DEFAULT_CONFIG_PATH = Path.home() / ".cloudstore" / "config.yml"


def get_default_config_file():
    """
    Get the default configuration file path if it exists.

    :returns: Path to ~/.cloudstore/config.yml if it exists, None otherwise
    """
    if DEFAULT_CONFIG_PATH.is_file():
        return str(DEFAULT_CONFIG_PATH)
    return None


def get_client_from_context(ctx):
    """
    Get or create a StorageClient from the CLI context.

    This lazily creates the client on first use.
    """
    if ctx.obj.get("client") is None:
        try:
            ctx.obj["client"] = storage_client_factory(ctx.obj["configdict"])
        except StorageError as e:
            click.echo(f"Configuration error: {e}", err=True)
            ctx.exit(1)
    return ctx.obj["client"]


def run(ctx, description, operation, *args):
    """
    Run ``operation`` on the context client, honoring ``--dry-run``.

    :returns: The operation result, or None on a dry run
    """
    if ctx.obj["dry_run"]:
        click.echo(f"DRY-RUN: would {description}")
        return None
    client = get_client_from_context(ctx)
    try:
        return getattr(client, operation)(*args)
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="cloudstore")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "-o",
    "--provider",
    type=click.Choice(PROVIDERS),
    default=None,
    help="Storage provider, overrides the configuration file",
)
@click.option(
    "-b",
    "--container",
    type=str,
    default=None,
    help="Container (bucket) name, overrides the configuration file",
)
@click.option(
    "-r",
    "--region",
    type=str,
    default=None,
    help="Region name, overrides the configuration file",
)
@click.option(
    "-e",
    "--endpoint",
    type=str,
    default=None,
    help="API base URL of an S3-compatible service (s3compatible provider only)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Do not perform any changes, only show what would happen",
)
@click.pass_context
def cli(ctx, config_path, provider, container, region, endpoint, dry_run):
    """
    Cloudstore - one interface over several object storage providers

    \b
    Configuration:
      Default config file: ~/.cloudstore/config.yml
      Override with: --config /path/to/config.yml
      Credentials may also come from CLOUDSTORE_KEY and CLOUDSTORE_KEY_ID

    \b
    Available commands:
      init            Create the container if it is missing
      upload          Upload a local file
      download        Download a remote file
      remove          Remove a remote file
    """
    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run

    if config_path is None:
        config_path = get_default_config_file()
        if config_path:
            click.echo(f"Using default config: {config_path}", err=True)

    try:
        config = load_config(config_path)
        configure_logging(config)
    except StorageError as e:
        click.echo(f"Configuration error: {e}", err=True)
        ctx.exit(1)

    overrides = {
        "provider": provider,
        "container": container,
        "region": region,
        "endpoint": endpoint,
    }
    for name, value in overrides.items():
        if value is not None:
            if not isinstance(config.get("storage"), dict):
                config["storage"] = {}
            config["storage"][name] = value

    if endpoint is not None and (
        config["storage"].get("provider", DEFAULT_PROVIDER) != PROVIDER_S3COMPATIBLE
    ):
        raise click.UsageError(
            "--endpoint only applies to the s3compatible provider", ctx=ctx
        )

    ctx.obj["configdict"] = config
    ctx.obj["config_path"] = config_path
    # Client will be created lazily when needed
    ctx.obj["client"] = None


@cli.command()
@click.pass_context
def init(ctx):
    """
    Create the configured container, if it does not exist yet.
    """
    run(ctx, "create the container", "init")
    if not ctx.obj["dry_run"]:
        click.echo("Container ready")


@cli.command()
@click.argument("local_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("dest_path", type=str)
@click.pass_context
def upload(ctx, local_path, dest_path):
    """
    Upload LOCAL_PATH to DEST_PATH inside the container.

    Prints the container, path, filename and public url as JSON.
    """
    result = run(ctx, f"upload {local_path} to {dest_path}", "upload", local_path, dest_path)
    if result is not None:
        click.echo(json.dumps(result.to_dict(), indent=2))


@cli.command()
@click.argument("dest_path", type=str)
@click.argument("local_path", type=click.Path(dir_okay=False, writable=True))
@click.pass_context
def download(ctx, dest_path, local_path):
    """
    Download DEST_PATH from the container into LOCAL_PATH.

    LOCAL_PATH is created, or truncated if it exists.
    """
    run(ctx, f"download {dest_path} to {local_path}", "download", dest_path, local_path)
    if not ctx.obj["dry_run"]:
        click.echo(f"Downloaded {dest_path} to {local_path}")


@cli.command()
@click.argument("dest_path", type=str)
@click.pass_context
def remove(ctx, dest_path):
    """
    Remove DEST_PATH from the container.
    """
    run(ctx, f"remove {dest_path}", "remove", dest_path)
    if not ctx.obj["dry_run"]:
        click.echo(f"Removed {dest_path}")


if __name__ == "__main__":
    cli()
