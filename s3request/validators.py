"""Bucket name and region validation.

To comply with S3 requirements, bucket names must:
- Contain only letters, numbers, periods (.), underscores (_), and dashes (-)
- Start with a number or letter
- Be between 3 and 255 characters long
- Not be in an IP address style (e.g., "192.168.5.4")

Virtual-host addressing needs the stricter DNS-compatible subset checked by
is_dns_compatible_bucket.
"""

import re
from enum import Enum
from typing import NewType, Union

from s3request.errors import BucketNameRule, InvalidBucketName, InvalidRegion

BucketName = NewType("BucketName", str)

_CHARSET_RE = re.compile(r"^[a-zA-Z0-9._-]+$")
_START_RE = re.compile(r"^[a-zA-Z0-9]")
_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9]{1,2})"
_IPV4_RE = re.compile(rf"^{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}$")
_DNS_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.-]*[a-z0-9]$")

MIN_BUCKET_LENGTH = 3
MAX_BUCKET_LENGTH = 255
MAX_DNS_BUCKET_LENGTH = 63


class Region(Enum):
    """Known region codes accepted as a location constraint."""

    AP_NORTHEAST_1 = "ap-northeast-1"
    AP_NORTHEAST_2 = "ap-northeast-2"
    AP_NORTHEAST_3 = "ap-northeast-3"
    AP_SOUTH_1 = "ap-south-1"
    AP_SOUTHEAST_1 = "ap-southeast-1"
    AP_SOUTHEAST_2 = "ap-southeast-2"
    CA_CENTRAL_1 = "ca-central-1"
    CN_NORTH_1 = "cn-north-1"
    CN_NORTHWEST_1 = "cn-northwest-1"
    EU_CENTRAL_1 = "eu-central-1"
    EU_WEST_1 = "eu-west-1"
    EU_WEST_2 = "eu-west-2"
    EU_WEST_3 = "eu-west-3"
    SA_EAST_1 = "sa-east-1"
    US_EAST_1 = "us-east-1"
    US_EAST_2 = "us-east-2"
    US_WEST_1 = "us-west-1"
    US_WEST_2 = "us-west-2"


# Backward compatibility with the historical 'US' and 'EU' values
REGION_ALIASES = {
    "US": Region.US_EAST_1,
    "EU": Region.EU_WEST_1,
}


def validate_bucket_name(raw: str) -> BucketName:
    """Validate a bucket name against the general naming invariants.

    Args:
        raw: Candidate bucket name.

    Returns:
        The input, unchanged, typed as a BucketName.

    Raises:
        InvalidBucketName: On the first violated invariant, carrying the
            offending value and the rule that failed.
    """
    if not isinstance(raw, str) or not _CHARSET_RE.match(raw):
        raise InvalidBucketName(str(raw), BucketNameRule.CHARSET)

    if not _START_RE.match(raw):
        raise InvalidBucketName(raw, BucketNameRule.START)

    if not MIN_BUCKET_LENGTH <= len(raw) <= MAX_BUCKET_LENGTH:
        raise InvalidBucketName(raw, BucketNameRule.LENGTH)

    if _IPV4_RE.match(raw):
        raise InvalidBucketName(raw, BucketNameRule.IP_ADDRESS)

    return BucketName(raw)


def normalize_region(raw: Union[str, Region]) -> Region:
    """Normalize a region code, resolving legacy aliases.

    Args:
        raw: A region code, a legacy alias ('US', 'EU'), or a Region.

    Returns:
        The canonical Region member.

    Raises:
        InvalidRegion: If the value is not a known region or alias.
    """
    if isinstance(raw, Region):
        return raw

    if raw in REGION_ALIASES:
        return REGION_ALIASES[raw]

    try:
        return Region(raw)
    except ValueError:
        raise InvalidRegion(raw) from None


def is_dns_compatible_bucket(name: str) -> bool:
    """Check whether a bucket name can be used as a DNS label prefix.

    A name may pass validate_bucket_name and still fail here, e.g. when it
    contains uppercase letters or underscores.
    """
    if not MIN_BUCKET_LENGTH <= len(name) <= MAX_DNS_BUCKET_LENGTH:
        return False
    if not _DNS_BUCKET_RE.match(name):
        return False
    if ".." in name or ".-" in name or "-." in name:
        return False
    if _IPV4_RE.match(name):
        return False
    return True
