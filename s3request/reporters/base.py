"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from s3request.errors import Advisory
    from s3request.models import SignedRequest


class Reporter(ABC):
    """Abstract base class for request build reporters."""

    @abstractmethod
    def on_advisory(self, advisory: "Advisory") -> None:
        """Called for each advisory raised while building a request."""
        pass

    @abstractmethod
    def on_request_built(self, request: "SignedRequest") -> None:
        """Called when a request has been signed and assembled."""
        pass


REDACTED = "<redacted>"

# Query parameters and headers that act as bearer credentials
SENSITIVE_QUERY_PARAMS = {
    "Signature",
    "X-Amz-Signature",
    "X-Amz-Security-Token",
    "x-amz-security-token",
}
SENSITIVE_HEADERS = {"x-amz-security-token"}


def redact_authorization(value: str) -> str:
    """Keep the credential part of an Authorization value, hide the signature.

    Examples:
        "AWS AKID:c2lnbmF0dXJl" -> "AWS AKID:<redacted>"
        "AWS4-HMAC-SHA256 Credential=..., Signature=abc" ->
            "AWS4-HMAC-SHA256 Credential=..., Signature=<redacted>"
    """
    if "Signature=" in value:
        return value[: value.index("Signature=") + len("Signature=")] + REDACTED
    if value.startswith("AWS ") and ":" in value:
        return value[: value.rindex(":") + 1] + REDACTED
    return REDACTED


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    redacted = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            redacted[name] = redact_authorization(value)
        elif name.lower() in SENSITIVE_HEADERS:
            redacted[name] = REDACTED
        else:
            redacted[name] = value
    return redacted


def redact_url(url: str) -> str:
    """Replace the values of signature-bearing query parameters."""
    base, sep, query = url.partition("?")
    if not sep:
        return url

    parts = []
    for item in query.split("&"):
        name, has_value, _ = item.partition("=")
        if has_value and name in SENSITIVE_QUERY_PARAMS:
            parts.append(f"{name}={REDACTED}")
        else:
            parts.append(item)
    return f"{base}?{'&'.join(parts)}"
