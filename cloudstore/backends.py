"""
backends.py

Storage backend abstraction for cloudstore.
A backend owns the SDK connection and performs the raw transfers. It does not
rewrite errors or build results: :py:class:`~.cloudstore.client.StorageClient`
does that, once, for every provider.
"""

import abc
import logging
from typing import BinaryIO, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from cloudstore.constants import (
    BUCKET_EXISTS_CODES,
    DOWNLOAD_CHUNK_SIZE,
    HEADER_ARGS,
    METADATA_HEADER_PREFIXES,
)


def headers_to_extra_args(headers: dict) -> dict:
    """
    Translate HTTP-style upload headers into boto3 ``ExtraArgs``.

    ``x-amz-acl: public-read`` becomes ``{"ACL": "public-read"}``, and
    ``x-amz-meta-owner: me`` becomes ``{"Metadata": {"owner": "me"}}``.
    Header names are matched case-insensitively.
    Configured headers are checked by :py:func:`~.cloudstore.defaults.headers`
    when the client is built.

    :param headers: Header name to value mapping
    :type headers: dict

    :rtype: dict

    :raises ValueError: if a header has no boto3 argument
    """
    extra_args = {}
    for name, value in (headers or {}).items():
        lowered = name.lower()
        if lowered in HEADER_ARGS:
            extra_args[HEADER_ARGS[lowered]] = value
            continue
        prefix = next(
            (p for p in METADATA_HEADER_PREFIXES if lowered.startswith(p)), None
        )
        if prefix:
            extra_args.setdefault("Metadata", {})[lowered[len(prefix):]] = value
        else:
            raise ValueError(f"Header {name} has no upload equivalent")
    return extra_args


class StorageBackend(metaclass=abc.ABCMeta):
    """
    Superclass for storage backends.

    This class should *only* move bytes and create or delete remote things. It
    should not handle naming, configuration defaults, or error messages. The
    calling methods should handle that.
    """

    @abc.abstractmethod
    def create_container(self, container: str) -> None:
        """
        Create a container (bucket) with the given name, if absent.

        Args:
            container (str): The name of the container to create.

        Returns:
            None
        """
        return

    @abc.abstractmethod
    def put_file(
        self, container: str, remote: str, fileobj: BinaryIO, headers: dict
    ) -> None:
        """
        Stream ``fileobj`` into ``container`` at ``remote``.

        Args:
            container (str): The name of the container.
            remote (str): The object path inside the container.
            fileobj (BinaryIO): Readable binary stream.
            headers (dict): Upload headers (ACL, content type...).

        Returns:
            None
        """
        return

    @abc.abstractmethod
    def get_file(self, container: str, remote: str, fileobj: BinaryIO) -> dict:
        """
        Stream the object at ``remote`` into ``fileobj``.

        Args:
            container (str): The name of the container.
            remote (str): The object path inside the container.
            fileobj (BinaryIO): Writable binary stream.

        Returns:
            dict: Whatever metadata the transfer reported.
        """
        return

    @abc.abstractmethod
    def delete_file(self, container: str, remote: str) -> None:
        """
        Delete the object at ``remote``.

        Args:
            container (str): The name of the container.
            remote (str): The object path inside the container.

        Returns:
            None
        """
        return


class Boto3Backend(StorageBackend):
    """
    A storage backend for anything speaking the S3 API, through boto3.

    :param key_id: Access key id
    :param key: Secret access key
    :param region: Region name, or None to let boto3 resolve it
    :param endpoint_url: API base URL, or None for AWS itself
    :param addressing_style: ``virtual``, ``path`` or None for the boto3 default
    """

    def __init__(
        self,
        key_id: str,
        key: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        addressing_style: Optional[str] = None,
    ) -> None:
        self.loggit = logging.getLogger("cloudstore.backends.Boto3Backend")
        self.endpoint_url = endpoint_url
        config = None
        if addressing_style:
            config = Config(s3={"addressing_style": addressing_style})
        self.client = boto3.client(
            "s3",
            aws_access_key_id=key_id,
            aws_secret_access_key=key,
            region_name=region,
            endpoint_url=endpoint_url,
            config=config,
        )
        self.loggit.debug(
            "boto3 S3 client created (region: %s, endpoint: %s)",
            region,
            endpoint_url or "AWS",
        )

    def create_container(self, container: str) -> None:
        self.loggit.info(f"Creating bucket: {container}")
        try:
            region = self.client.meta.region_name
            self.loggit.debug(f"Creating bucket in region: {region}")

            # AWS requires LocationConstraint for all regions except us-east-1
            if self.endpoint_url is None and region and region != "us-east-1":
                self.client.create_bucket(
                    Bucket=container,
                    CreateBucketConfiguration={"LocationConstraint": region},
                )
            else:
                self.client.create_bucket(Bucket=container)
            self.loggit.info(f"Successfully created bucket {container}")
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in BUCKET_EXISTS_CODES:
                self.loggit.info(f"Bucket {container} already exists")
                return
            self.loggit.error(f"Error creating bucket {container}: {error_code} - {e}")
            raise

    def put_file(
        self, container: str, remote: str, fileobj: BinaryIO, headers: dict
    ) -> None:
        extra_args = headers_to_extra_args(headers)
        self.loggit.debug(
            "Uploading to s3://%s/%s with %s", container, remote, sorted(extra_args)
        )
        self.client.upload_fileobj(
            fileobj, container, remote, ExtraArgs=extra_args or None
        )

    def get_file(self, container: str, remote: str, fileobj: BinaryIO) -> dict:
        self.loggit.debug(f"Downloading s3://{container}/{remote}")
        response = self.client.get_object(Bucket=container, Key=remote)
        body = response.pop("Body")
        try:
            for chunk in body.iter_chunks(chunk_size=DOWNLOAD_CHUNK_SIZE):
                fileobj.write(chunk)
        finally:
            body.close()
        return response

    def delete_file(self, container: str, remote: str) -> None:
        self.loggit.debug(f"Deleting s3://{container}/{remote}")
        self.client.delete_object(Bucket=container, Key=remote)
