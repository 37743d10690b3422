"""Console reporter using Rich library for formatted output.

Shows what was actually signed, which is what is needed to chase down a
SignatureDoesNotMatch response:
- Method and (redacted) URL
- Headers table
- Canonical request and string to sign
- Advisories
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from s3request.errors import Advisory, AdvisoryKind
from s3request.models import SignedRequest
from s3request.reporters.base import Reporter, redact_headers, redact_url

ADVISORY_LABELS = {
    AdvisoryKind.VIRTUAL_HOST_INCOMPATIBLE: "VHOST",
    AdvisoryKind.CLOCK_SKEW_RISK: "SKEW",
}


class ConsoleReporter(Reporter):
    """Rich-based console reporter.

    Args:
        quiet: If True, print only the request line and advisories.
        console: Console to print to; a new one is created if omitted.
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)
        self.quiet = quiet

    def on_advisory(self, advisory: Advisory) -> None:
        """Print a yellow warning line for the advisory."""
        label = ADVISORY_LABELS.get(advisory.kind, advisory.kind.value)
        self.console.print(f"  [yellow][{label}][/yellow] {advisory.message}")

    def on_request_built(self, request: SignedRequest) -> None:
        """Print the request line and, unless quiet, its signing material."""
        version = request.signature_version.name if request.signature_version else "-"

        self.console.print()
        self.console.print(
            Rule(
                f"[bold cyan]{request.method} {redact_url(request.url)}[/bold cyan]",
                style="cyan",
                characters="-",
            )
        )

        if self.quiet:
            return

        table = Table(
            title=f"Headers (signature {version})",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )
        table.add_column("Header", style="cyan", no_wrap=True)
        table.add_column("Value")
        for name, value in redact_headers(request.headers).items():
            table.add_row(name, value)
        self.console.print(table)

        if request.canonical_request:
            self.console.print(
                Panel(Text(request.canonical_request), title="Canonical request", box=box.ASCII)
            )
        if request.string_to_sign:
            self.console.print(
                Panel(Text(request.string_to_sign), title="String to sign", box=box.ASCII)
            )
