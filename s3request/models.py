"""Data models for request construction."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

import boto3
import httpx

from s3request.errors import Advisory, InvalidRequestParameter, MissingCredentials

HTTP_METHODS = frozenset({"GET", "PUT", "POST", "DELETE", "HEAD"})


class SignatureVersion(Enum):
    """Request signing algorithm."""

    V2 = "v2"
    V4 = "v4"


class AclShort(Enum):
    """Canned access control lists."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"
    AUTHENTICATED_READ = "authenticated-read"


@dataclass(frozen=True)
class Credentials:
    """Access credentials, passed explicitly into every signing call.

    The secret key and session token are excluded from repr so they cannot
    leak through logs or tracebacks.
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_boto3_session(cls, session: Optional[boto3.Session] = None) -> "Credentials":
        """Freeze the credentials resolved by a boto3 session.

        Args:
            session: Session to read from; a default boto3.Session() (and so
                boto3's usual provider chain) is used when omitted.

        Returns:
            Credentials snapshot taken from the session's provider chain.

        Raises:
            MissingCredentials: If the session resolves no credentials.
        """
        if session is None:
            session = boto3.Session()

        resolved = session.get_credentials()
        if resolved is None:
            raise MissingCredentials("boto3 session has no credentials configured")

        frozen = resolved.get_frozen_credentials()
        return cls(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one API call.

    Attributes:
        method: HTTP method.
        path: Path-style resource path ("bucket/encoded/key"), optionally
            followed by "?subresource". Empty for the service root.
        bucket: Target bucket, or None for service-level calls.
        key: Unencoded object key, if any.
        query_extra: Additional query parameters, in order.
        headers_extra: Additional headers; signer headers win on collision.
        body: Request payload.
        use_virtual_host: Whether virtual-host addressing is requested.
        signature_version: Signing algorithm, or None for the endpoint default.
    """

    method: str
    path: str
    bucket: Optional[str] = None
    key: Optional[str] = None
    query_extra: tuple[tuple[str, Optional[str]], ...] = ()
    headers_extra: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    use_virtual_host: bool = True
    signature_version: Optional[SignatureVersion] = None

    def __post_init__(self):
        if self.method not in HTTP_METHODS:
            raise InvalidRequestParameter(
                "method", self.method, f"must be one of {sorted(HTTP_METHODS)}"
            )
        object.__setattr__(self, "query_extra", tuple(self.query_extra))
        object.__setattr__(
            self, "headers_extra", MappingProxyType(dict(self.headers_extra))
        )


@dataclass(frozen=True)
class SignResult:
    """Output of a signer.

    canonical_request and string_to_sign are kept for diagnosing signature
    mismatches; neither contains secret material.
    """

    headers: Mapping[str, str]
    query_additions: tuple[tuple[str, str], ...] = ()
    canonical_request: str = ""
    string_to_sign: str = ""
    advisories: tuple[Advisory, ...] = ()


@dataclass(frozen=True)
class Address:
    """Where a request is sent: scheme, host and encoded URL path."""

    scheme: str
    host: str
    path: str
    virtual_host: bool = False
    advisories: tuple[Advisory, ...] = ()


@dataclass(frozen=True)
class SignedRequest:
    """A fully authenticated request, ready for a transport."""

    method: str
    url: str
    host: str
    path: str
    headers: Mapping[str, str]
    body: Optional[bytes] = None
    signature_version: Optional[SignatureVersion] = None
    advisories: tuple[Advisory, ...] = ()
    canonical_request: str = ""
    string_to_sign: str = ""

    def to_httpx(self) -> httpx.Request:
        """Convert to an httpx.Request for sending with an httpx client."""
        return httpx.Request(
            self.method,
            self.url,
            headers=dict(self.headers),
            content=self.body,
        )
