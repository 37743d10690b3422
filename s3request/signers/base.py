"""Shared signer interface and canonicalization helpers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Mapping, Optional, Protocol

from s3request.errors import Advisory, AdvisoryKind
from s3request.models import Address, Credentials, RequestDescriptor, SignResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Requests dated further than this from the service's clock are rejected
CLOCK_SKEW_TOLERANCE = timedelta(minutes=15)


class Signer(Protocol):
    """Signing capability implemented by SignatureV2 and SignatureV4."""

    def sign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Clock,
        address: Address,
    ) -> SignResult:
        """Produce the authentication headers for a request."""
        ...

    def presign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Clock,
        address: Address,
        expires_in: int,
    ) -> SignResult:
        """Produce query parameters that authenticate a URL on their own."""
        ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def read_clock(clock: Clock) -> datetime:
    """Read the clock once, treating naive datetimes as UTC."""
    now = clock()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def check_clock_skew(
    now: datetime,
    wall_clock: Clock,
    tolerance: timedelta = CLOCK_SKEW_TOLERANCE,
) -> tuple[Advisory, ...]:
    """Compare a signing timestamp against the wall clock.

    Returns:
        A one-element tuple holding a CLOCK_SKEW_RISK advisory when the drift
        exceeds the tolerance, otherwise an empty tuple.
    """
    drift = abs(now - read_clock(wall_clock))
    if drift <= tolerance:
        return ()

    advisory = Advisory(
        kind=AdvisoryKind.CLOCK_SKEW_RISK,
        message=(
            f"Signing time {now.isoformat()} differs from the wall clock by "
            f"{int(drift.total_seconds())}s (tolerance "
            f"{int(tolerance.total_seconds())}s); the service may reject it"
        ),
        value=now.isoformat(),
    )
    logger.warning(advisory.message)
    return (advisory,)


def fold_header_value(value: str) -> str:
    """Trim a header value and collapse inner runs of whitespace."""
    return " ".join(str(value).split())


def group_headers(
    headers: Mapping[str, str],
    include: Optional[Callable[[str], bool]] = None,
) -> list[tuple[str, str]]:
    """Lower-case, group and sort headers for canonicalization.

    Headers whose names differ only in case are joined with ',' in the order
    they appear.

    Args:
        headers: Headers as they will be sent.
        include: Optional predicate on the lower-cased name.

    Returns:
        Sorted (lower-cased name, joined value) pairs.
    """
    grouped: dict[str, list[str]] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if include is not None and not include(lowered):
            continue
        grouped.setdefault(lowered, []).append(fold_header_value(value))
    return [(name, ",".join(grouped[name])) for name in sorted(grouped)]


def find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def query_pairs(
    subresources: Iterable[tuple[str, Optional[str]]],
    descriptor: RequestDescriptor,
) -> list[tuple[str, Optional[str]]]:
    """All query parameters a descriptor puts on the wire, in order."""
    return list(subresources) + list(descriptor.query_extra)
