"""
Option defaults for the cloudstore package.

Each function returns a single-key dict pairing a voluptuous marker (with its
default, if any) to the validation rule for that option. Provider schemas are
assembled from these in :py:mod:`cloudstore.validators`.
"""

from voluptuous import All, Any, Coerce, Invalid, Length, Optional, Range, Required, Schema

from cloudstore.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_PROVIDER,
    HEADER_ARGS,
    LOG_BLACKLIST,
    METADATA_HEADER_PREFIXES,
)


def Url():
    """
    Validate that a string looks like an http(s) URL.
    """
    def validator(value):
        if isinstance(value, str) and value.startswith(("http://", "https://")):
            return value.rstrip("/")
        raise ValueError(f"Not an http(s) URL: {value}")
    return validator


def UploadHeaders():
    """
    Validate that every header name maps to a boto3 upload argument.
    """
    def validator(value):
        for name in value:
            lowered = name.lower()
            if lowered in HEADER_ARGS or lowered.startswith(METADATA_HEADER_PREFIXES):
                continue
            raise Invalid(f"Header {name} has no upload equivalent")
        return value
    return validator


# Connection options

def provider(name=DEFAULT_PROVIDER):
    """
    Storage provider to use. A provider schema only accepts its own name.
    """
    return {Optional("provider", default=name): Any(name)}


def container():
    """
    Name of the bucket holding every object.
    """
    return {Required("container"): All(str, Length(min=1))}


def key():
    """
    Secret access key.
    """
    return {Required("key"): All(str, Length(min=1))}


def key_id():
    """
    Access key id.
    """
    return {Required("key_id"): All(str, Length(min=1))}


def region():
    """
    Region name handed to the SDK. None lets boto3 resolve it.
    """
    return {Optional("region", default=None): Any(None, str)}


def endpoint():
    """
    API base URL of an S3-compatible service, e.g. ``http://localhost:9000``
    """
    return {Required("endpoint"): All(str, Url())}


def endpoint_uri():
    """
    Public base URL of the container, used verbatim. Filled in from the
    provider convention when left out.
    """
    return {Optional("endpoint_uri"): All(str, Length(min=1))}


def headers(default=None):
    """
    Headers applied to every upload. Names are matched case-insensitively
    against :py:data:`~.cloudstore.constants.HEADER_ARGS`, plus the
    ``x-amz-meta-`` and ``x-goog-meta-`` prefixes.
    """
    return {
        Optional("headers", default=lambda: dict(default or {})): All(
            {str: str}, UploadHeaders()
        )
    }


def max_workers():
    """
    Size of the thread pool used by ``submit``.
    """
    return {
        Optional("max_workers", default=DEFAULT_MAX_WORKERS): All(
            Coerce(int), Range(min=1, max=64)
        )
    }


# Logging options

def config_logging():
    """
    Logging schema with defaults:

    .. code-block:: yaml

        logging:
          loglevel: INFO
          logfile: None
          logformat: default
          blacklist: ['botocore', 'boto3', 's3transfer', 'urllib3']
    """
    return Schema(
        {
            Optional("loglevel", default="INFO"): Any(
                None,
                All(str, lambda v: v.upper(),
                    Any("NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")),
                All(Coerce(int), Any(0, 10, 20, 30, 40, 50)),
            ),
            Optional("logfile", default=None): Any(None, str),
            Optional("logformat", default="default"): Any(
                None, "default", "json", "logstash", "ecs"
            ),
            Optional("blacklist", default=lambda: list(LOG_BLACKLIST)): Any(None, [str]),
        }
    )
