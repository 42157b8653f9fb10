"""
Constants for the cloudstore package.
"""

# Provider names
PROVIDER_AMAZON = "amazon"
PROVIDER_GOOGLE = "google"
PROVIDER_S3COMPATIBLE = "s3compatible"
PROVIDERS = [PROVIDER_AMAZON, PROVIDER_GOOGLE, PROVIDER_S3COMPATIBLE]
DEFAULT_PROVIDER = PROVIDER_AMAZON

# Operation names accepted by StorageClient.submit
OPERATIONS = ["init", "upload", "download", "remove"]

# API base URL for Google Cloud Storage S3 interoperability
GOOGLE_API_ENDPOINT = "https://storage.googleapis.com"

# Header name -> boto3 ExtraArgs key, covering boto3's upload arguments
HEADER_ARGS = {
    "x-amz-acl": "ACL",
    "x-goog-acl": "ACL",
    "cache-control": "CacheControl",
    "content-disposition": "ContentDisposition",
    "content-encoding": "ContentEncoding",
    "content-language": "ContentLanguage",
    "content-md5": "ContentMD5",
    "content-type": "ContentType",
    "expires": "Expires",
    "x-amz-expected-bucket-owner": "ExpectedBucketOwner",
    "x-amz-grant-full-control": "GrantFullControl",
    "x-amz-grant-read": "GrantRead",
    "x-amz-grant-read-acp": "GrantReadACP",
    "x-amz-grant-write-acp": "GrantWriteACP",
    "x-amz-object-lock-legal-hold": "ObjectLockLegalHoldStatus",
    "x-amz-object-lock-mode": "ObjectLockMode",
    "x-amz-object-lock-retain-until-date": "ObjectLockRetainUntilDate",
    "x-amz-request-payer": "RequestPayer",
    "x-amz-sdk-checksum-algorithm": "ChecksumAlgorithm",
    "x-amz-server-side-encryption": "ServerSideEncryption",
    "x-amz-server-side-encryption-aws-kms-key-id": "SSEKMSKeyId",
    "x-amz-server-side-encryption-context": "SSEKMSEncryptionContext",
    "x-amz-server-side-encryption-customer-algorithm": "SSECustomerAlgorithm",
    "x-amz-server-side-encryption-customer-key": "SSECustomerKey",
    "x-amz-server-side-encryption-customer-key-md5": "SSECustomerKeyMD5",
    "x-amz-storage-class": "StorageClass",
    "x-goog-storage-class": "StorageClass",
    "x-amz-tagging": "Tagging",
    "x-amz-website-redirect-location": "WebsiteRedirectLocation",
}
METADATA_HEADER_PREFIXES = ("x-amz-meta-", "x-goog-meta-")

# S3 error codes meaning the bucket is already there and usable
BUCKET_EXISTS_CODES = ["BucketAlreadyOwnedByYou"]

# Chunk size used when streaming a download body to disk
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

DEFAULT_MAX_WORKERS = 4

# Loggers silenced by default
LOG_BLACKLIST = ["botocore", "boto3", "s3transfer", "urllib3"]
