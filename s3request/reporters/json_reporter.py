"""JSON reporter for structured traces of built requests.

Each entry records what was signed (method, redacted URL and headers,
canonical request, string to sign) and any advisories, so a trace can be
attached to a bug report without exposing signatures or session tokens.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from s3request.errors import Advisory
from s3request.models import SignedRequest
from s3request.reporters.base import Reporter, redact_headers, redact_url


class JsonReporter(Reporter):
    """JSON reporter collecting one entry per built request.

    Args:
        output_path: Optional file path the trace is written to by write()
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path
        self._entries: list[dict] = []

    def on_advisory(self, advisory: Advisory) -> None:
        """No-op - advisories are recorded with their request."""
        pass

    def on_request_built(self, request: SignedRequest) -> None:
        """Store a redacted entry for the request."""
        self._entries.append(self._entry(request))

    def _entry(self, request: SignedRequest) -> dict:
        entry = {
            "method": request.method,
            "url": redact_url(request.url),
            "host": request.host,
            "path": request.path,
            "signature_version": (
                request.signature_version.value if request.signature_version else None
            ),
            "headers": redact_headers(request.headers),
            "advisories": [
                {
                    "kind": advisory.kind.value,
                    "message": advisory.message,
                    "value": advisory.value,
                }
                for advisory in request.advisories
            ],
        }
        if request.canonical_request:
            entry["canonical_request"] = request.canonical_request
        if request.string_to_sign:
            entry["string_to_sign"] = request.string_to_sign
        return entry

    def to_dict(self) -> dict:
        """Generate the JSON output structure."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "requests": list(self._entries),
            "summary": {
                "total_requests": len(self._entries),
                "advisories": sum(len(e["advisories"]) for e in self._entries),
            },
        }

    def write(self, output_path: Optional[str] = None) -> dict:
        """Write the trace to a file.

        Args:
            output_path: Overrides the path given at construction.

        Returns:
            The data that was written.

        Raises:
            ValueError: If no output path is known.
        """
        target = output_path or self.output_path
        if not target:
            raise ValueError("No output path configured for JsonReporter")

        output = self.to_dict()
        path = Path(target)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)

        return output
