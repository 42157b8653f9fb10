"""Tests for provider profiles"""

from unittest.mock import patch

import pytest

from cloudstore.exceptions import ConfigurationError
from cloudstore.providers import (
    AMAZON,
    GOOGLE,
    PROVIDER_REGISTRY,
    S3COMPATIBLE,
    get_provider,
    normalize_options,
)


class TestGetProvider:
    """Tests for get_provider"""

    def test_registry_covers_providers(self):
        """Test every provider name is registered"""
        from cloudstore.constants import PROVIDERS

        assert sorted(PROVIDER_REGISTRY) == sorted(PROVIDERS)

    def test_returns_profile(self):
        """Test known names return their profile"""
        assert get_provider("amazon") is AMAZON
        assert get_provider("google") is GOOGLE
        assert get_provider("s3compatible") is S3COMPATIBLE

    def test_unknown_provider(self):
        """Test unknown names raise ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            get_provider("azure")
        assert "Unsupported provider: azure" in str(exc_info.value)


class TestConfigure:
    """Tests for Provider.configure"""

    def test_amazon_effective_configuration(self, amazon_config):
        """Test defaults of the default provider"""
        config = AMAZON.configure(amazon_config)

        assert config["provider"] == "amazon"
        assert config["headers"] == {"x-amz-acl": "public-read"}
        assert config["endpoint_uri"] == "http://bucket1.s3.amazonaws.com"

    def test_google_endpoint_uri(self):
        """Test the google public URL convention"""
        config = GOOGLE.configure({"container": "media", "key": "k", "key_id": "id"})
        assert config["endpoint_uri"] == "http://media.storage.googleapis.com"
        assert config["provider"] == "google"

    def test_s3compatible_endpoint_uri(self):
        """Test the path-style URL convention"""
        config = S3COMPATIBLE.configure({
            "container": "media", "key": "k", "key_id": "id",
            "endpoint": "http://minio.local:9000",
        })
        assert config["endpoint_uri"] == "http://minio.local:9000/media"

    def test_explicit_endpoint_uri_kept(self, amazon_config):
        """Test a given endpoint_uri is not replaced"""
        amazon_config["endpoint_uri"] = "https://cdn.example.com/"
        config = AMAZON.configure(amazon_config)
        assert config["endpoint_uri"] == "https://cdn.example.com/"

    def test_scheme_relative_endpoint_uri(self, amazon_config):
        """Test an endpoint_uri without a scheme is accepted as given"""
        amazon_config["endpoint_uri"] = "//cdn.example.com"
        config = AMAZON.configure(amazon_config)
        assert config["endpoint_uri"] == "//cdn.example.com"

    def test_camelcase_aliases(self):
        """Test keyId and endpointUri are accepted"""
        config = AMAZON.configure({
            "container": "b", "key": "k", "keyId": "id",
            "endpointUri": "https://cdn.example.com",
        })
        assert config["key_id"] == "id"
        assert config["endpoint_uri"] == "https://cdn.example.com"

    def test_does_not_modify_input(self, amazon_config):
        """Test the caller's dict is left alone"""
        before = dict(amazon_config)
        AMAZON.configure(amazon_config)
        assert amazon_config == before


class TestNormalizeOptions:
    """Tests for normalize_options"""

    def test_duplicate_spelling(self):
        """Test both spellings of one option are rejected"""
        with pytest.raises(ConfigurationError):
            normalize_options({"keyId": "a", "key_id": "b"})

    def test_none(self):
        """Test None gives an empty dict"""
        assert normalize_options(None) == {}


class TestCreateBackend:
    """Tests for Provider.create_backend"""

    @patch("cloudstore.backends.boto3")
    def test_amazon_backend(self, mock_boto3, amazon_config):
        """Test amazon connects to AWS itself"""
        config = AMAZON.configure(amazon_config)
        backend = AMAZON.create_backend(config)

        assert backend.client is mock_boto3.client.return_value
        kwargs = mock_boto3.client.call_args.kwargs
        assert kwargs["aws_access_key_id"] == "id"
        assert kwargs["aws_secret_access_key"] == "k"
        assert kwargs["endpoint_url"] is None
        assert kwargs["config"] is None

    @patch("cloudstore.backends.boto3")
    def test_google_backend(self, mock_boto3):
        """Test google connects to the interoperability endpoint"""
        config = GOOGLE.configure({"container": "b", "key": "k", "key_id": "id"})
        GOOGLE.create_backend(config)

        kwargs = mock_boto3.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "https://storage.googleapis.com"

    @patch("cloudstore.backends.boto3")
    def test_s3compatible_backend(self, mock_boto3):
        """Test s3compatible uses its endpoint with path addressing"""
        config = S3COMPATIBLE.configure({
            "container": "b", "key": "k", "key_id": "id",
            "endpoint": "http://minio.local:9000", "region": "us-west-2",
        })
        S3COMPATIBLE.create_backend(config)

        kwargs = mock_boto3.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "http://minio.local:9000"
        assert kwargs["region_name"] == "us-west-2"
        assert kwargs["config"].s3 == {"addressing_style": "path"}
