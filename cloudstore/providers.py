"""Provider profiles

A provider is not a client class: it is a small profile describing how to
configure one storage service. Every provider shares the operations in
:py:class:`~.cloudstore.client.StorageClient` and only supplies its defaults,
its validation schema, its public URL convention and its backend.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from cloudstore.backends import Boto3Backend, StorageBackend
from cloudstore.constants import (
    GOOGLE_API_ENDPOINT,
    PROVIDER_AMAZON,
    PROVIDER_GOOGLE,
    PROVIDER_S3COMPATIBLE,
)
from cloudstore.exceptions import ConfigurationError
from cloudstore.validators import validate_options

# camelCase option names accepted for compatibility with older configurations
OPTION_ALIASES = {
    "keyId": "key_id",
    "endpointUri": "endpoint_uri",
    "maxWorkers": "max_workers",
}


def normalize_options(options: dict) -> dict:
    """
    Return a copy of ``options`` with camelCase aliases renamed.

    :raises ConfigurationError: if both spellings of an option are given
    """
    normalized = {}
    for name, value in (options or {}).items():
        target = OPTION_ALIASES.get(name, name)
        if target in normalized:
            raise ConfigurationError(f"Option {target} given more than once")
        normalized[target] = value
    return normalized


@dataclass(frozen=True)
class Provider:
    """
    Configuration profile of one storage provider.

    Attributes:
        name (str): The provider name used in configuration (``amazon``...).
        label (str): The prefix of every error message (``AmazonClient``...).
        url_template (str): Public container URL, formatted with the
            validated configuration.
        endpoint_url (str): API base URL handed to boto3. None means AWS, or
            the ``endpoint`` option when the provider requires one.
        addressing_style (str): boto3 S3 addressing style, if forced.
    """

    name: str
    label: str
    url_template: str
    endpoint_url: Optional[str] = None
    addressing_style: Optional[str] = None

    def configure(self, options: dict) -> dict:
        """
        Merge ``options`` over this provider's defaults and validate them.

        :param options: Caller supplied configuration
        :type options: dict

        :returns: The effective configuration, ``endpoint_uri`` included
        :rtype: dict

        :raises ConfigurationError: if a required option is missing or invalid
        """
        options = normalize_options(options)
        options.setdefault("provider", self.name)
        config = validate_options(self.name, options)
        if "endpoint_uri" not in config:
            config["endpoint_uri"] = self.endpoint_uri(config)
        return config

    def endpoint_uri(self, config: dict) -> str:
        """Public base URL of the container"""
        return self.url_template.format(**config)

    def create_backend(self, config: dict) -> StorageBackend:
        """
        Open the one connection a client will use.

        :param config: A configuration returned by :py:meth:`configure`
        """
        logging.getLogger("cloudstore.providers").debug(
            "Creating %s backend for container %s", self.name, config["container"]
        )
        return Boto3Backend(
            key_id=config["key_id"],
            key=config["key"],
            region=config.get("region"),
            endpoint_url=config.get("endpoint", self.endpoint_url),
            addressing_style=self.addressing_style,
        )


AMAZON = Provider(
    name=PROVIDER_AMAZON,
    label="AmazonClient",
    url_template="http://{container}.s3.amazonaws.com",
)

GOOGLE = Provider(
    name=PROVIDER_GOOGLE,
    label="GoogleClient",
    url_template="http://{container}.storage.googleapis.com",
    endpoint_url=GOOGLE_API_ENDPOINT,
)

S3COMPATIBLE = Provider(
    name=PROVIDER_S3COMPATIBLE,
    label="S3CompatibleClient",
    url_template="{endpoint}/{container}",
    addressing_style="path",
)

PROVIDER_REGISTRY = {p.name: p for p in (AMAZON, GOOGLE, S3COMPATIBLE)}


def get_provider(name: str) -> Provider:
    """
    Return the profile registered under ``name``.

    Raises:
        ConfigurationError: raised if the provider is not implemented
    """
    try:
        return PROVIDER_REGISTRY[name]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported provider: {name}. "
            f"Valid providers are: {list(PROVIDER_REGISTRY.keys())}"
        ) from None
