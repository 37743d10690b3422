"""Request signers, selected by SignatureVersion."""

from typing import Callable, Optional

from s3request.models import SignatureVersion
from s3request.signers.base import Clock, Signer, utc_now
from s3request.signers.v2 import SignatureV2
from s3request.signers.v4 import SignatureV4
from s3request.validators import Region

_SIGNERS: dict[SignatureVersion, Callable[..., Signer]] = {
    SignatureVersion.V2: lambda region, service, wall_clock: SignatureV2(
        wall_clock=wall_clock
    ),
    SignatureVersion.V4: lambda region, service, wall_clock: SignatureV4(
        region=region, service=service, wall_clock=wall_clock
    ),
}


def signer_for(
    version: SignatureVersion,
    region: Optional[Region] = None,
    service: str = "s3",
    wall_clock: Clock = utc_now,
) -> Signer:
    """Return the signer implementing a signature version.

    V2 ignores region and service. A V4 signer without a region raises
    MissingSigningContext when it is used, not here.
    """
    return _SIGNERS[version](region, service, wall_clock)


__all__ = ["Clock", "SignatureV2", "SignatureV4", "Signer", "signer_for"]
