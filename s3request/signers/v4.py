"""AWS Signature Version 4.

Reference: https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html

The signing key is derived from the secret access key through a series of
HMAC-SHA256 operations: kSecret -> kDate -> kRegion -> kService -> kSigning,
which scopes it to one day, region and service. Signing therefore needs a
region, unlike V2.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

from s3request.errors import InvalidRequestParameter, MissingSigningContext
from s3request.http_request import merge_headers
from s3request.models import Address, Credentials, RequestDescriptor, SignResult
from s3request.signers.base import (
    Clock,
    check_clock_skew,
    group_headers,
    query_pairs,
    read_clock,
    utc_now,
)
from s3request.uri import encode_component, split_subresource
from s3request.validators import Region

logger = logging.getLogger(__name__)

ALGORITHM = "AWS4-HMAC-SHA256"
TERMINATOR = "aws4_request"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
EMPTY_PAYLOAD_HASH = hashlib.sha256(b"").hexdigest()

# Presigned URLs may be valid for at most seven days
MAX_PRESIGN_EXPIRES = 7 * 24 * 60 * 60


def _sign(key: bytes, msg: str) -> bytes:
    """HMAC-SHA256 signing helper"""
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """Derive the day/region/service scoped signing key."""
    k_date = _sign(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = _sign(k_date, region)
    k_service = _sign(k_region, service)
    return _sign(k_service, TERMINATOR)


def hash_payload(payload: Optional[bytes]) -> str:
    """Calculate SHA256 hash of the payload"""
    if not payload:
        return EMPTY_PAYLOAD_HASH
    return hashlib.sha256(payload).hexdigest()


def canonical_query_string(pairs: Iterable[tuple[str, Optional[str]]]) -> str:
    """Encode every parameter and sort by name, then value.

    Parameters without a value are emitted as "name=".
    """
    encoded = sorted(
        (encode_component(name), encode_component(value or ""))
        for name, value in pairs
    )
    return "&".join(f"{name}={value}" for name, value in encoded)


def canonical_headers(headers: Mapping[str, str]) -> tuple[str, str]:
    """Build the canonical headers block and the signed headers list."""
    grouped = group_headers(headers)
    block = "".join(f"{name}:{value}\n" for name, value in grouped)
    signed = ";".join(name for name, _ in grouped)
    return block, signed


@dataclass(frozen=True)
class SignatureV4:
    """Signature Version 4 signer, scoped to a region and service."""

    region: Optional[Region] = None
    service: str = "s3"
    wall_clock: Clock = utc_now

    def _region_code(self) -> str:
        if self.region is None:
            raise MissingSigningContext(
                "Signature V4 requires a region; configure one for the endpoint"
            )
        return self.region.value

    def credential_scope(self, date_stamp: str, region: str) -> str:
        return f"{date_stamp}/{region}/{self.service}/{TERMINATOR}"

    def canonical_request(
        self,
        descriptor: RequestDescriptor,
        address: Address,
        headers: Mapping[str, str],
        query: Iterable[tuple[str, Optional[str]]],
        payload_hash: str,
    ) -> tuple[str, str]:
        """Build the canonical request.

        Format:
        HTTPMethod\\n
        CanonicalURI\\n
        CanonicalQueryString\\n
        CanonicalHeaders\\n
        SignedHeaders\\n
        HashedPayload

        Returns:
            The canonical request and its signed headers list.
        """
        header_block, signed_headers = canonical_headers(headers)
        canonical = "\n".join([
            descriptor.method,
            address.path or "/",
            canonical_query_string(query),
            header_block,
            signed_headers,
            payload_hash,
        ])
        return canonical, signed_headers

    def string_to_sign(self, amz_date: str, scope: str, canonical_request: str) -> str:
        hashed = hashlib.sha256(canonical_request.encode("utf-8")).hexdigest()
        return "\n".join([ALGORITHM, amz_date, scope, hashed])

    def _scope_for(self, now: datetime) -> tuple[str, str, str, str]:
        region = self._region_code()
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        date_stamp = now.strftime("%Y%m%d")
        return region, amz_date, date_stamp, self.credential_scope(date_stamp, region)

    def sign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Clock,
        address: Address,
    ) -> SignResult:
        """Sign with an Authorization header.

        Raises:
            MissingSigningContext: If no region is configured.
        """
        now = read_clock(clock)
        region, amz_date, date_stamp, scope = self._scope_for(now)
        advisories = check_clock_skew(now, self.wall_clock)

        payload_hash = hash_payload(descriptor.body)
        signer_headers = {
            "Host": address.host,
            "x-amz-content-sha256": payload_hash,
            "x-amz-date": amz_date,
        }
        if credentials.session_token:
            signer_headers["x-amz-security-token"] = credentials.session_token

        view = merge_headers(signer_headers, descriptor.headers_extra)
        _, subresources = split_subresource(descriptor.path)
        canonical, signed_headers = self.canonical_request(
            descriptor,
            address,
            view,
            query_pairs(subresources, descriptor),
            payload_hash,
        )
        string_to_sign = self.string_to_sign(amz_date, scope, canonical)
        signing_key = derive_signing_key(
            credentials.secret_access_key, date_stamp, region, self.service
        )
        signature = hmac.new(
            signing_key, string_to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()

        signer_headers["Authorization"] = (
            f"{ALGORITHM} "
            f"Credential={credentials.access_key_id}/{scope}, "
            f"SignedHeaders={signed_headers}, "
            f"Signature={signature}"
        )

        logger.debug(
            "Signed %s %s%s with V4 (scope %s)",
            descriptor.method,
            address.host,
            address.path,
            scope,
        )

        return SignResult(
            headers=signer_headers,
            canonical_request=canonical,
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
        """Sign with X-Amz-* query parameters.

        The host header and every descriptor header are signed and listed in
        X-Amz-SignedHeaders; the caller must send the descriptor headers
        along with the URL.

        Raises:
            MissingSigningContext: If no region is configured.
            InvalidRequestParameter: If expires_in is outside 1..604800.
        """
        if not 1 <= expires_in <= MAX_PRESIGN_EXPIRES:
            raise InvalidRequestParameter(
                "expires_in",
                expires_in,
                f"must be between 1 and {MAX_PRESIGN_EXPIRES} seconds",
            )

        now = read_clock(clock)
        region, amz_date, date_stamp, scope = self._scope_for(now)
        advisories = check_clock_skew(now, self.wall_clock)

        view = merge_headers({"host": address.host}, descriptor.headers_extra)
        _, signed_headers = canonical_headers(view)

        additions: list[tuple[str, str]] = [
            ("X-Amz-Algorithm", ALGORITHM),
            ("X-Amz-Credential", f"{credentials.access_key_id}/{scope}"),
            ("X-Amz-Date", amz_date),
            ("X-Amz-Expires", str(int(expires_in))),
            ("X-Amz-SignedHeaders", signed_headers),
        ]
        if credentials.session_token:
            additions.append(("X-Amz-Security-Token", credentials.session_token))

        _, subresources = split_subresource(descriptor.path)
        canonical, _ = self.canonical_request(
            descriptor,
            address,
            view,
            query_pairs(subresources, descriptor) + additions,
            UNSIGNED_PAYLOAD,
        )
        string_to_sign = self.string_to_sign(amz_date, scope, canonical)
        signing_key = derive_signing_key(
            credentials.secret_access_key, date_stamp, region, self.service
        )
        signature = hmac.new(
            signing_key, string_to_sign.encode("utf-8"), hashlib.sha256
        ).hexdigest()
        additions.append(("X-Amz-Signature", signature))

        logger.debug(
            "Presigned %s %s%s with V4 (scope %s, expires %ss)",
            descriptor.method,
            address.host,
            address.path,
            scope,
            expires_in,
        )

        return SignResult(
            headers={},
            query_additions=tuple(additions),
            canonical_request=canonical,
            string_to_sign=string_to_sign,
            advisories=advisories,
        )
