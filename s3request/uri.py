"""Resource path and query string construction.

Keys are encoded one '/'-delimited segment at a time so that the separators
inside a key survive unescaped while every reserved character inside a
segment is escaped.
"""

from typing import Iterable, Optional
from urllib.parse import quote, unquote


def encode_component(value: str) -> str:
    """Percent-encode a value as a URI component.

    Only the RFC 3986 unreserved characters (A-Z a-z 0-9 - . _ ~) are left
    as-is; everything else, including '/', is escaped as UTF-8.
    """
    return quote(value, safe="")


def build_resource_path(bucket: str, key: Optional[str] = None) -> str:
    """Build the path-style resource path for a bucket and optional key.

    Args:
        bucket: A validated bucket name.
        key: Object key, which may contain '/'.

    Returns:
        "bucket/" without a key, otherwise "bucket/" followed by the
        segment-wise encoded key. Empty segments are preserved.
    """
    if key is None:
        return bucket + "/"

    return bucket + "/" + "/".join(encode_component(part) for part in key.split("/"))


def decode_key(encoded: str) -> str:
    """Recover an object key from its segment-wise encoded form."""
    return "/".join(unquote(part) for part in encoded.split("/"))


def encode_query(pairs: Iterable[tuple[str, Optional[str]]]) -> str:
    """Encode (name, value) pairs as a query string.

    A value of None emits the bare name (e.g. "acl").
    """
    parts = []
    for name, value in pairs:
        if value is None:
            parts.append(encode_component(name))
        else:
            parts.append(f"{encode_component(name)}={encode_component(value)}")
    return "&".join(parts)


def split_subresource(path: str) -> tuple[str, tuple[tuple[str, Optional[str]], ...]]:
    """Split a descriptor path into its resource and sub-resource pairs.

    Example:
        >>> split_subresource("bucket/key?acl")
        ('bucket/key', (('acl', None),))
    """
    resource, sep, query = path.partition("?")
    if not sep or not query:
        return resource, ()

    pairs = []
    for item in query.split("&"):
        name, has_value, value = item.partition("=")
        pairs.append((unquote(name), unquote(value) if has_value else None))
    return resource, tuple(pairs)
