"""Request builder facade.

Wires an endpoint configuration, a clock and an optional reporter around
the resolve -> sign -> assemble pipeline.
"""

import dataclasses
import logging
from typing import Optional

from s3request.config import EndpointConfig
from s3request.errors import InvalidRequestParameter
from s3request.http_request import assemble, resolve_address
from s3request.models import Credentials, RequestDescriptor, SignedRequest
from s3request.reporters.base import Reporter
from s3request.signers import Clock, Signer, signer_for
from s3request.signers.base import utc_now

logger = logging.getLogger(__name__)


class RequestBuilder:
    """Builds signed requests for one endpoint.

    Holds no per-request state, so one builder can serve concurrent callers
    as long as the reporter it was given tolerates that.

    Args:
        config: Endpoint configuration; defaults to EndpointConfig().
        clock: Source of the signing time.
        reporter: Optional reporter notified of every built request.
        wall_clock: Reference clock used to detect skew in `clock`.
    """

    def __init__(
        self,
        config: Optional[EndpointConfig] = None,
        clock: Clock = utc_now,
        reporter: Optional[Reporter] = None,
        wall_clock: Clock = utc_now,
    ):
        self.config = config or EndpointConfig()
        self.clock = clock
        self.reporter = reporter
        self.wall_clock = wall_clock

    def _prepare(self, descriptor: RequestDescriptor) -> tuple[RequestDescriptor, Signer]:
        if descriptor.signature_version is None:
            descriptor = dataclasses.replace(
                descriptor, signature_version=self.config.signature_version
            )
        signer = signer_for(
            descriptor.signature_version,
            region=self.config.region,
            service=self.config.service,
            wall_clock=self.wall_clock,
        )
        return descriptor, signer

    def _report(self, signed: SignedRequest) -> None:
        if self.reporter is None:
            return
        for advisory in signed.advisories:
            self.reporter.on_advisory(advisory)
        self.reporter.on_request_built(signed)

    def build(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        clock: Optional[Clock] = None,
    ) -> SignedRequest:
        """Sign a descriptor with an Authorization header.

        Args:
            descriptor: Request descriptor from an operation factory.
            credentials: Credentials used for this call only.
            clock: Overrides the builder's clock for this call.

        Returns:
            The SignedRequest ready for a transport.

        Raises:
            MissingSigningContext: If V4 is selected without a region.
        """
        descriptor, signer = self._prepare(descriptor)
        address = resolve_address(descriptor, self.config)
        sign_result = signer.sign(descriptor, credentials, clock or self.clock, address)
        signed = assemble(descriptor, sign_result, address)

        logger.debug(
            "Built %s request for %s with %s",
            signed.method,
            signed.host,
            descriptor.signature_version.name,
        )
        self._report(signed)
        return signed

    def presign_request(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        expires_in: int = 3600,
        clock: Optional[Clock] = None,
    ) -> SignedRequest:
        """Presign a descriptor, keeping the headers that must accompany it.

        The returned url carries the authentication; its headers are the
        descriptor headers that were signed and must be sent unchanged.

        Raises:
            InvalidRequestParameter: If expires_in is out of range for the
                signature version.
            MissingSigningContext: If V4 is selected without a region.
        """
        descriptor, signer = self._prepare(descriptor)
        address = resolve_address(descriptor, self.config)
        sign_result = signer.presign(
            descriptor, credentials, clock or self.clock, address, expires_in
        )
        signed = assemble(descriptor, sign_result, address)
        self._report(signed)
        return signed

    def presign(
        self,
        descriptor: RequestDescriptor,
        credentials: Credentials,
        expires_in: int = 3600,
        clock: Optional[Clock] = None,
    ) -> str:
        """Build a URL that carries its own authentication.

        Args:
            descriptor: Request descriptor from an operation factory.
            credentials: Credentials used for this call only.
            expires_in: Validity of the URL in seconds.
            clock: Overrides the builder's clock for this call.

        Returns:
            The presigned absolute URL.

        Raises:
            InvalidRequestParameter: If the descriptor carries headers, which
                a bare URL cannot convey; use presign_request instead.
        """
        if descriptor.headers_extra:
            raise InvalidRequestParameter(
                "headers_extra",
                sorted(descriptor.headers_extra),
                "headers must be sent with the URL; use presign_request",
            )
        return self.presign_request(descriptor, credentials, expires_in, clock).url
