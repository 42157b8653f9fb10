"""
Schema validation for the cloudstore package.

This module provides voluptuous schemas for validating storage and logging
configuration, one storage schema per provider.
"""

import logging
import re

from voluptuous import Schema

from cloudstore import defaults
from cloudstore.constants import PROVIDER_AMAZON, PROVIDER_GOOGLE, PROVIDER_S3COMPATIBLE
from cloudstore.exceptions import ConfigurationError


# Provider option schemas
# Each schema lists the option defaults that apply to that provider

PROVIDER_OPTIONS = {
    PROVIDER_AMAZON: [
        defaults.provider(PROVIDER_AMAZON),
        defaults.container(),
        defaults.key(),
        defaults.key_id(),
        defaults.region(),
        defaults.headers({"x-amz-acl": "public-read"}),
        defaults.endpoint_uri(),
        defaults.max_workers(),
    ],
    PROVIDER_GOOGLE: [
        defaults.provider(PROVIDER_GOOGLE),
        defaults.container(),
        defaults.key(),
        defaults.key_id(),
        defaults.region(),
        defaults.headers({"x-goog-acl": "public-read"}),
        defaults.endpoint_uri(),
        defaults.max_workers(),
    ],
    PROVIDER_S3COMPATIBLE: [
        defaults.provider(PROVIDER_S3COMPATIBLE),
        defaults.container(),
        defaults.key(),
        defaults.key_id(),
        defaults.region(),
        defaults.endpoint(),
        defaults.headers(),
        defaults.endpoint_uri(),
        defaults.max_workers(),
    ],
}

# Never echoed back in logs or error messages
SECRET_OPTIONS = ("key",)


def _build_schema(option_list: list) -> Schema:
    """
    Build a voluptuous Schema from a list of option definitions.

    Args:
        option_list: List of option definition dicts

    Returns:
        Schema: A voluptuous Schema that validates all options
    """
    schema_dict = {}
    for option_def in option_list:
        schema_dict.update(option_def)
    return Schema(schema_dict)


PROVIDER_SCHEMAS = {
    name: _build_schema(options) for name, options in PROVIDER_OPTIONS.items()
}


def redact(config: dict) -> dict:
    """Return a copy of ``config`` safe to log"""
    return {k: ("********" if k in SECRET_OPTIONS else v) for k, v in config.items()}


class SchemaCheck:
    """
    Validate ``config`` with ``schema``. ``test_what`` and ``location`` are only
    used to report failures. If validation succeeds, :py:meth:`result` returns
    the validated configuration, with defaults applied.

    :param config: A configuration dictionary
    :param schema: A voluptuous schema definition
    :param test_what: Which configuration block is being validated
    :param location: Which sub-block is being validated

    :type config: dict
    :type schema: :py:class:`~.voluptuous.schema_builder.Schema`
    :type test_what: str
    :type location: str
    """

    def __init__(self, config, schema, test_what, location):
        self.loggit = logging.getLogger("cloudstore.validators.SchemaCheck")
        self.loggit.debug('"%s" config: %s', test_what, redact(config))
        self.config = config
        self.schema = schema
        self.test_what = test_what
        self.location = location
        self.badvalue = None
        self.error = None

    def __parse_error(self):
        """
        Try to find the offending key from the error path.
        """
        match = re.search(r"@ data\['([^']+)'\]", str(self.error))
        if not match:
            self.badvalue = "(could not determine)"
            return
        option = match.group(1)
        if option in SECRET_OPTIONS:
            self.badvalue = "********"
        else:
            self.badvalue = self.config.get(option, "(missing)")

    def result(self):
        """
        Evaluate :py:attr:`config` using :py:attr:`schema`. Log the error if
        validation fails, then raise a
        :py:exc:`~.cloudstore.exceptions.ConfigurationError`

        :returns: The validated configuration
        :rtype: dict
        """
        try:
            return self.schema(self.config)
        except Exception as err:
            errors = getattr(err, "errors", None)
            self.error = errors[0] if errors else f"{err}"
            self.__parse_error()
            self.loggit.error("Schema error: %s", self.error)
            raise ConfigurationError(
                f"Configuration: {self.test_what}: Location: {self.location}: "
                f'Bad Value: "{self.badvalue}", {self.error}. Check configuration.'
            ) from err


def get_schema(provider: str) -> Schema:
    """
    Get the storage validation schema for a provider.

    Args:
        provider: The provider name

    Returns:
        Schema: The voluptuous Schema for the provider

    Raises:
        ConfigurationError: If the provider is not recognized
    """
    if provider not in PROVIDER_SCHEMAS:
        raise ConfigurationError(
            f"Unsupported provider: {provider}. "
            f"Valid providers are: {list(PROVIDER_SCHEMAS.keys())}"
        )
    return PROVIDER_SCHEMAS[provider]


def validate_options(provider: str, options: dict) -> dict:
    """
    Validate storage options for a provider, applying defaults.

    Args:
        provider: The provider name (amazon, google, s3compatible)
        options: Dictionary of option values to validate

    Returns:
        dict: Validated and normalized options with defaults applied

    Raises:
        ConfigurationError: If validation fails or the provider is unknown
    """
    schema = get_schema(provider)
    return SchemaCheck(options, schema, "storage", provider).result()


def validate_logging(options: dict) -> dict:
    """
    Validate logging options, applying defaults.

    Args:
        options: The ``logging`` section of a configuration

    Returns:
        dict: Validated logging options
    """
    return SchemaCheck(
        options or {}, defaults.config_logging(), "logging", "logging"
    ).result()
