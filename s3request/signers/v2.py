"""AWS Signature Version 2.

String to sign:

    HTTP-Verb \\n
    Content-MD5 \\n
    Content-Type \\n
    Date \\n
    CanonicalizedAmzHeaders
    CanonicalizedResource

The signature is a base64 HMAC-SHA1 keyed directly by the secret key, so
no date, region or service scoping is needed.
"""

import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass
from email.utils import format_datetime
from typing import Mapping

from s3request.errors import InvalidRequestParameter
from s3request.http_request import merge_headers
from s3request.models import Address, Credentials, RequestDescriptor, SignResult
from s3request.signers.base import (
    Clock,
    check_clock_skew,
    find_header,
    group_headers,
    query_pairs,
    read_clock,
    utc_now,
)
from s3request.uri import split_subresource

logger = logging.getLogger(__name__)

# Query parameters that are part of the canonicalized resource
SUBRESOURCES = frozenset({
    "acl",
    "cors",
    "delete",
    "lifecycle",
    "location",
    "logging",
    "notification",
    "partNumber",
    "policy",
    "requestPayment",
    "response-cache-control",
    "response-content-disposition",
    "response-content-encoding",
    "response-content-language",
    "response-content-type",
    "response-expires",
    "restore",
    "tagging",
    "torrent",
    "uploadId",
    "uploads",
    "versionId",
    "versioning",
    "versions",
    "website",
})


def _is_amz_header(name: str) -> bool:
    return name.startswith("x-amz-")


@dataclass(frozen=True)
class SignatureV2:
    """Signature Version 2 signer."""

    wall_clock: Clock = utc_now

    def canonical_resource(self, descriptor: RequestDescriptor) -> str:
        """Path-style resource plus the sorted recognized sub-resources."""
        resource, subresources = split_subresource(descriptor.path)
        signed = sorted(
            (
                (name, value)
                for name, value in query_pairs(subresources, descriptor)
                if name in SUBRESOURCES
            ),
            key=lambda pair: pair[0],
        )

        canonical = "/" + resource
        if signed:
            canonical += "?" + "&".join(
                name if value is None else f"{name}={value}" for name, value in signed
            )
        return canonical

    def string_to_sign(
        self,
        descriptor: RequestDescriptor,
        headers: Mapping[str, str],
        date: str,
    ) -> str:
        """Build the V2 string to sign.

        Args:
            descriptor: The request being signed.
            headers: Headers as they will be sent.
            date: Value for the Date slot (HTTP date, or Expires when
                presigning). Emptied when an x-amz-date header is present.
        """
        if find_header(headers, "x-amz-date") is not None:
            date = ""

        amz_headers = "".join(
            f"{name}:{value}\n" for name, value in group_headers(headers, _is_amz_header)
        )

        return (
            f"{descriptor.method}\n"
            f"{find_header(headers, 'Content-MD5') or ''}\n"
            f"{find_header(headers, 'Content-Type') or ''}\n"
            f"{date}\n"
            f"{amz_headers}"
            f"{self.canonical_resource(descriptor)}"
        )

    @staticmethod
    def signature(secret_key: str, string_to_sign: str) -> str:
        digest = hmac.new(
            secret_key.encode("utf-8"),
            string_to_sign.encode("utf-8"),
            hashlib.sha1,
        ).digest()
        return base64.b64encode(digest).decode("ascii")

    def _token_headers(self, credentials: Credentials) -> dict[str, str]:
        if credentials.session_token:
            return {"x-amz-security-token": credentials.session_token}
        return {}

    def sign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Clock,
        address: Address,
    ) -> SignResult:
        """Sign with an Authorization header.

        Returns:
            SignResult with Date, Authorization and, for temporary
            credentials, x-amz-security-token headers.
        """
        now = read_clock(clock)
        advisories = check_clock_skew(now, self.wall_clock)

        date = format_datetime(now, usegmt=True)
        signer_headers = {"Date": date}
        signer_headers.update(self._token_headers(credentials))

        view = merge_headers(signer_headers, descriptor.headers_extra)
        string_to_sign = self.string_to_sign(descriptor, view, date)
        signature = self.signature(credentials.secret_access_key, string_to_sign)
        signer_headers["Authorization"] = f"AWS {credentials.access_key_id}:{signature}"

        logger.debug("Signed %s %s with V2", descriptor.method, address.path)

        return SignResult(
            headers=signer_headers,
            string_to_sign=string_to_sign,
            advisories=advisories,
        )

    def presign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Clock,
        address: Address,
        expires_in: int,
    ) -> SignResult:
        """Sign with query parameters (query string authentication).

        The Expires epoch takes the place of the Date in the string to sign.
        Content-MD5, Content-Type and x-amz-* descriptor headers are signed,
        so the caller must send them along with the URL.

        Raises:
            InvalidRequestParameter: If expires_in is less than one second.
        """
        if expires_in < 1:
            raise InvalidRequestParameter(
                "expires_in", expires_in, "must be at least 1 second"
            )

        now = read_clock(clock)
        advisories = check_clock_skew(now, self.wall_clock)
        expires = str(int(now.timestamp()) + int(expires_in))

        token_headers = self._token_headers(credentials)
        view = merge_headers(token_headers, descriptor.headers_extra)
        string_to_sign = self.string_to_sign(descriptor, view, expires)
        signature = self.signature(credentials.secret_access_key, string_to_sign)

        additions: list[tuple[str, str]] = [
            ("AWSAccessKeyId", credentials.access_key_id),
            ("Expires", expires),
        ]
        additions.extend(token_headers.items())
        additions.append(("Signature", signature))

        logger.debug("Presigned %s %s with V2", descriptor.method, address.path)

        return SignResult(
            headers={},
            query_additions=tuple(additions),
            string_to_sign=string_to_sign,
            advisories=advisories,
        )
