"""Error taxonomy and advisories for request construction.

Fatal problems are raised as exceptions derived from S3RequestError and are
detected before any network attempt. Recoverable conditions (virtual-host
fallback, clock skew) are reported as Advisory values attached to the
result instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class S3RequestError(Exception):
    """Base class for request construction failures."""

    pass


class BucketNameRule(Enum):
    """Bucket name invariants, in the order they are checked."""

    CHARSET = "charset"
    START = "start"
    LENGTH = "length"
    IP_ADDRESS = "ip_address"


_BUCKET_RULE_MESSAGES = {
    BucketNameRule.CHARSET: (
        "must contain only letters, numbers, periods (.), underscores (_), "
        "and dashes (-)"
    ),
    BucketNameRule.START: "must start with a number or letter",
    BucketNameRule.LENGTH: "must be between 3 and 255 characters long",
    BucketNameRule.IP_ADDRESS: (
        "must not be in an IP address style (e.g., '192.168.5.4')"
    ),
}


class InvalidBucketName(S3RequestError):
    """Raised when a bucket name violates one of the naming invariants."""

    def __init__(self, value: str, rule: BucketNameRule):
        super().__init__(f"Bucket name ({value}) {_BUCKET_RULE_MESSAGES[rule]}")
        self.value = value
        self.rule = rule


class InvalidRegion(S3RequestError):
    """Raised when a region code is neither known nor a legacy alias."""

    def __init__(self, value: str):
        super().__init__(f"Unknown region: {value!r}")
        self.value = value


class MissingSigningContext(S3RequestError):
    """Raised when a signer lacks the context it needs (e.g. V4 region)."""

    pass


class MissingCredentials(S3RequestError):
    """Raised when no credentials could be resolved from a provider."""

    pass


class InvalidRequestParameter(S3RequestError, ValueError):
    """Raised when an operation parameter cannot produce a valid request."""

    def __init__(self, name: str, value: object, reason: str):
        super().__init__(f"Invalid {name} ({value!r}): {reason}")
        self.name = name
        self.value = value
        self.reason = reason


class AdvisoryKind(Enum):
    """Non-fatal conditions surfaced while building a request."""

    VIRTUAL_HOST_INCOMPATIBLE = "virtual_host_incompatible"
    CLOCK_SKEW_RISK = "clock_skew_risk"


@dataclass(frozen=True)
class Advisory:
    """A recorded, non-blocking diagnostic."""

    kind: AdvisoryKind
    message: str
    value: Optional[str] = None
