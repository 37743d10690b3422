"""
S3 request construction and signing.

Turns S3 API operations into fully authenticated, wire-ready HTTP requests
using AWS Signature Version 2 or 4, without sending them.
"""

__version__ = "1.0.0"

from s3request.client import RequestBuilder
from s3request.config import EndpointConfig, load_endpoint_config
from s3request.errors import (
    Advisory,
    AdvisoryKind,
    InvalidBucketName,
    InvalidRegion,
    InvalidRequestParameter,
    MissingCredentials,
    MissingSigningContext,
    S3RequestError,
)
from s3request.models import Credentials, RequestDescriptor, SignatureVersion, SignedRequest
from s3request.validators import Region, normalize_region, validate_bucket_name

__all__ = [
    "Advisory",
    "AdvisoryKind",
    "Credentials",
    "EndpointConfig",
    "InvalidBucketName",
    "InvalidRegion",
    "InvalidRequestParameter",
    "MissingCredentials",
    "MissingSigningContext",
    "Region",
    "RequestBuilder",
    "RequestDescriptor",
    "S3RequestError",
    "SignatureVersion",
    "SignedRequest",
    "__version__",
    "load_endpoint_config",
    "normalize_region",
    "validate_bucket_name",
]
