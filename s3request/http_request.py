"""HTTP request assembly.

Chooses between virtual-host ("bucket.endpoint/key") and path-style
("endpoint/bucket/key") addressing, then merges the signer's output with
the descriptor into a SignedRequest.
"""

import logging
from typing import Mapping

from s3request.config import EndpointConfig
from s3request.errors import Advisory, AdvisoryKind
from s3request.models import Address, RequestDescriptor, SignedRequest, SignResult
from s3request.uri import encode_query, split_subresource
from s3request.validators import is_dns_compatible_bucket

logger = logging.getLogger(__name__)


def merge_headers(
    signer_headers: Mapping[str, str],
    extra: Mapping[str, str],
) -> dict[str, str]:
    """Merge descriptor headers with signer headers.

    Header names are compared case-insensitively; on collision the signer's
    header is kept and the descriptor's is dropped.
    """
    taken = {name.lower() for name in signer_headers}
    merged = {name: value for name, value in extra.items() if name.lower() not in taken}
    merged.update(signer_headers)
    return merged


def resolve_address(descriptor: RequestDescriptor, config: EndpointConfig) -> Address:
    """Decide the host and URL path a descriptor is sent to.

    Virtual-host addressing is used only when the descriptor requests it,
    the endpoint allows it, a bucket is present and the bucket name is DNS
    compatible. Over HTTPS a dotted bucket name is also excluded. Such
    buckets fall back to path style with a VIRTUAL_HOST_INCOMPATIBLE
    advisory.
    """
    resource, _ = split_subresource(descriptor.path)
    wants_virtual = (
        descriptor.use_virtual_host
        and config.addressing_style == "virtual"
        and descriptor.bucket is not None
    )

    reason = None
    if wants_virtual:
        if not is_dns_compatible_bucket(descriptor.bucket):
            reason = "is not DNS compatible"
        elif config.secure and "." in descriptor.bucket:
            # *.endpoint wildcard certificates match a single label only
            reason = "contains '.', which the endpoint's TLS certificate does not cover"

    if wants_virtual and reason is None:
        # resource always starts with "bucket/"
        path = "/" + resource[len(descriptor.bucket) + 1:]
        return Address(
            scheme=config.scheme,
            host=f"{descriptor.bucket}.{config.host}",
            path=path,
            virtual_host=True,
        )

    advisories = ()
    if wants_virtual:
        advisory = Advisory(
            kind=AdvisoryKind.VIRTUAL_HOST_INCOMPATIBLE,
            message=(
                f"Bucket name ({descriptor.bucket}) {reason}; "
                "falling back to path-style addressing"
            ),
            value=descriptor.bucket,
        )
        logger.warning(advisory.message)
        advisories = (advisory,)

    return Address(
        scheme=config.scheme,
        host=config.host,
        path="/" + resource,
        virtual_host=False,
        advisories=advisories,
    )


def build_query_string(descriptor: RequestDescriptor, sign_result: SignResult) -> str:
    """Join path sub-resources, query_extra and signer query additions."""
    _, subresources = split_subresource(descriptor.path)
    return encode_query(
        list(subresources)
        + list(descriptor.query_extra)
        + list(sign_result.query_additions)
    )


def assemble(
    descriptor: RequestDescriptor,
    sign_result: SignResult,
    address: Address,
) -> SignedRequest:
    """Assemble the final request handed to the transport.

    Args:
        descriptor: The operation's request descriptor.
        sign_result: Headers and query additions produced by a signer.
        address: The resolved addressing for this descriptor.

    Returns:
        The SignedRequest carrying every advisory raised along the way.
    """
    query = build_query_string(descriptor, sign_result)
    url = f"{address.scheme}://{address.host}{address.path}"
    if query:
        url = f"{url}?{query}"

    headers = merge_headers(sign_result.headers, descriptor.headers_extra)

    logger.debug(
        "Assembled %s %s%s (virtual_host=%s)",
        descriptor.method,
        address.host,
        address.path,
        address.virtual_host,
    )

    return SignedRequest(
        method=descriptor.method,
        url=url,
        host=address.host,
        path=address.path,
        headers=headers,
        body=descriptor.body,
        signature_version=descriptor.signature_version,
        advisories=address.advisories + sign_result.advisories,
        canonical_request=sign_result.canonical_request,
        string_to_sign=sign_result.string_to_sign,
    )
