"""Operation factories.

Each factory is a pure function of its parameters that returns the
RequestDescriptor for one API call. Bucket names are validated here, before
anything is signed or sent.
"""

import base64
import hashlib
from typing import Mapping, Optional, Sequence, Union
from xml.sax.saxutils import escape

from s3request.errors import InvalidRequestParameter
from s3request.models import AclShort, RequestDescriptor, SignatureVersion
from s3request.uri import build_resource_path
from s3request.validators import Region, normalize_region, validate_bucket_name

# DeleteObjects accepts at most this many keys per request
MAX_DELETE_KEYS = 1000

AclLike = Union[AclShort, str]


def _acl_header(acl_short: Optional[AclLike]) -> dict[str, str]:
    if acl_short is None:
        return {}
    try:
        return {"x-amz-acl": AclShort(acl_short).value}
    except ValueError:
        raise InvalidRequestParameter(
            "acl_short",
            acl_short,
            f"must be one of {[acl.value for acl in AclShort]}",
        ) from None


def _acl_request(
    path: str,
    bucket: str,
    key: Optional[str],
    acl_short: Optional[AclLike],
    acl_xml: Optional[str],
) -> RequestDescriptor:
    """PUT ?acl with either a canned ACL header or an XML policy body."""
    if (acl_short is None) == (acl_xml is None):
        raise InvalidRequestParameter(
            "acl", acl_short or acl_xml, "provide exactly one of acl_short or acl_xml"
        )

    return RequestDescriptor(
        method="PUT",
        path=path + "?acl",
        bucket=bucket,
        key=key,
        headers_extra=_acl_header(acl_short),
        body=acl_xml.encode("utf-8") if acl_xml is not None else None,
    )


def list_all_buckets(
    signature_version: SignatureVersion = SignatureVersion.V2,
) -> RequestDescriptor:
    """List every bucket owned by the account.

    The service root has no bucket to address virtually, so path-style
    addressing is forced. It is signed with V2 unless overridden.
    """
    return RequestDescriptor(
        method="GET",
        path="",
        use_virtual_host=False,
        signature_version=signature_version,
    )


def create_bucket(
    bucket: str,
    acl_short: Optional[AclLike] = None,
    location_constraint: Optional[Union[str, Region]] = None,
) -> RequestDescriptor:
    """Create a bucket, optionally in a specific region.

    Args:
        bucket: Bucket name.
        acl_short: Canned ACL for the new bucket.
        location_constraint: Region code or legacy alias ('US', 'EU').
            us-east-1 is the default location and sends no configuration.
    """
    name = validate_bucket_name(bucket)

    body = None
    if location_constraint is not None:
        region = normalize_region(location_constraint)
        if region is not Region.US_EAST_1:
            body = (
                "<CreateBucketConfiguration><LocationConstraint>"
                f"{region.value}"
                "</LocationConstraint></CreateBucketConfiguration>"
            ).encode("utf-8")

    return RequestDescriptor(
        method="PUT",
        path=build_resource_path(name),
        bucket=name,
        headers_extra=_acl_header(acl_short),
        body=body,
    )


def delete_bucket(bucket: str) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return RequestDescriptor(method="DELETE", path=build_resource_path(name), bucket=name)


def list_bucket(
    bucket: str,
    prefix: Optional[str] = None,
    delimiter: Optional[str] = None,
    max_keys: Optional[int] = None,
    marker: Optional[str] = None,
) -> RequestDescriptor:
    """List one page of a bucket's keys.

    Following the marker to later pages is left to the caller.
    """
    name = validate_bucket_name(bucket)

    if max_keys is not None and max_keys < 0:
        raise InvalidRequestParameter("max_keys", max_keys, "must not be negative")

    query = []
    if prefix is not None:
        query.append(("prefix", prefix))
    if delimiter is not None:
        query.append(("delimiter", delimiter))
    if max_keys is not None:
        query.append(("max-keys", str(max_keys)))
    if marker is not None:
        query.append(("marker", marker))

    return RequestDescriptor(
        method="GET",
        path=build_resource_path(name),
        bucket=name,
        query_extra=tuple(query),
    )


def get_bucket_location(bucket: str) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="GET", path=build_resource_path(name) + "?location", bucket=name
    )


def get_bucket_acl(bucket: str) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="GET", path=build_resource_path(name) + "?acl", bucket=name
    )


def set_bucket_acl(
    bucket: str,
    acl_short: Optional[AclLike] = None,
    acl_xml: Optional[str] = None,
) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return _acl_request(build_resource_path(name), name, None, acl_short, acl_xml)


def get_object(bucket: str, key: str, byte_range: Optional[str] = None) -> RequestDescriptor:
    """Fetch an object, optionally a byte range (e.g. "bytes=0-9")."""
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="GET",
        path=build_resource_path(name, key),
        bucket=name,
        key=key,
        headers_extra={"Range": byte_range} if byte_range is not None else {},
    )


def head_object(bucket: str, key: str) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="HEAD", path=build_resource_path(name, key), bucket=name, key=key
    )


def put_object(
    bucket: str,
    key: str,
    body: bytes,
    content_type: Optional[str] = None,
    acl_short: Optional[AclLike] = None,
    metadata: Optional[Mapping[str, str]] = None,
) -> RequestDescriptor:
    """Store an object in a single request.

    Args:
        bucket: Bucket name.
        key: Object key.
        body: Object content.
        content_type: Content-Type header value.
        acl_short: Canned ACL for the object.
        metadata: User metadata, sent as x-amz-meta-<name> headers.
    """
    name = validate_bucket_name(bucket)

    headers = _acl_header(acl_short)
    if content_type is not None:
        headers["Content-Type"] = content_type
    for meta_name, meta_value in (metadata or {}).items():
        headers[f"x-amz-meta-{meta_name}"] = meta_value

    return RequestDescriptor(
        method="PUT",
        path=build_resource_path(name, key),
        bucket=name,
        key=key,
        headers_extra=headers,
        body=body,
    )


def delete_object(bucket: str, key: str) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="DELETE", path=build_resource_path(name, key), bucket=name, key=key
    )


def delete_multiple_objects(bucket: str, keys: Sequence[str]) -> RequestDescriptor:
    """Delete up to 1000 keys in one quiet-mode request.

    Raises:
        InvalidRequestParameter: If keys is empty or too long.
    """
    name = validate_bucket_name(bucket)

    if not keys:
        raise InvalidRequestParameter("keys", keys, "at least one key is required")
    if len(keys) > MAX_DELETE_KEYS:
        raise InvalidRequestParameter(
            "keys", len(keys), f"at most {MAX_DELETE_KEYS} keys per request"
        )

    objects = "".join(f"<Object><Key>{escape(key)}</Key></Object>" for key in keys)
    body = f"<Delete><Quiet>true</Quiet>{objects}</Delete>".encode("utf-8")
    content_md5 = base64.b64encode(hashlib.md5(body).digest()).decode("ascii")

    return RequestDescriptor(
        method="POST",
        path=build_resource_path(name) + "?delete",
        bucket=name,
        headers_extra={"Content-MD5": content_md5},
        body=body,
    )


def get_object_acl(bucket: str, key: str) -> RequestDescriptor:
    """Fetch an object's access control list."""
    name = validate_bucket_name(bucket)
    return RequestDescriptor(
        method="GET",
        path=build_resource_path(name, key) + "?acl",
        bucket=name,
        key=key,
    )


def set_object_acl(
    bucket: str,
    key: str,
    acl_short: Optional[AclLike] = None,
    acl_xml: Optional[str] = None,
) -> RequestDescriptor:
    name = validate_bucket_name(bucket)
    return _acl_request(build_resource_path(name, key), name, key, acl_short, acl_xml)
