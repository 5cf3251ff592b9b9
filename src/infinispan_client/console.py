"""
Console tracing for requests and responses, rendered with Rich.

Used by the client when ``ClientConfig.verbose`` is set and by the command
line. Authorization values and credentials are masked before printing.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

console = Console()
err_console = Console(stderr=True)

SENSITIVE_HEADERS = ("authorization", "proxy-authorization", "cookie")


def mask_sensitive(value: Optional[str], show_chars: int = 4) -> str:
    """
    Mask sensitive values for logging.

    Args:
        value: Value to mask
        show_chars: Number of characters to show before masking

    Returns:
        str: Masked value, or ``<none>`` for empty input
    """
    if not value:
        return "<none>"
    if len(value) <= show_chars:
        return "*" * len(value)
    return value[:show_chars] + "***"


def mask_auth_header(value: Optional[str]) -> str:
    """Keep the scheme and username visible, hide everything else."""
    if not value:
        return "<none>"
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "digest":
        for part in rest.split(","):
            key, _, val = part.strip().partition("=")
            if key == "username":
                return f"Digest username={val}, ***"
    return f"{scheme} ***"


def mask_headers(headers: Iterable[Tuple[str, str]]) -> dict:
    """Copy of ``headers`` safe for printing."""
    masked = {}
    for key, value in headers:
        if key.lower().endswith("authorization"):
            masked[key] = mask_auth_header(value)
        elif key.lower() in SENSITIVE_HEADERS:
            masked[key] = mask_sensitive(value)
        else:
            masked[key] = value
    return masked


def format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


def _lexer_for(content_type: Optional[str]) -> str:
    if content_type and "json" in content_type:
        return "json"
    return "text"


def print_request(
    method: str,
    url: str,
    headers: Iterable[Tuple[str, str]],
    body: Optional[bytes] = None,
    content_type: Optional[str] = None,
    out: Optional[Console] = None,
) -> None:
    """Print a request line, masked headers and body."""
    out = out or err_console
    headers = list(headers)
    out.print(Panel(f"[bold cyan]{method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]"))
    out.print("[bold]Headers:[/bold]", mask_headers(headers))
    if body:
        out.print(
            Panel(
                Syntax(format_body(body), _lexer_for(content_type), theme="monokai"),
                title="[bold]Request Body[/bold]",
            )
        )


def print_response(
    status_code: int,
    reason: str,
    url: str,
    headers: Iterable[Tuple[str, str]],
    body: Optional[bytes] = None,
    out: Optional[Console] = None,
) -> None:
    """Print a status line (green for 2xx), headers and an optional body."""
    out = out or err_console
    headers = list(headers)
    status_color = "green" if 200 <= status_code < 300 else "red"
    out.print(
        Panel(
            f"[bold {status_color}]{status_code}[/bold {status_color}] {reason}",
            title=f"[bold blue]Response[/bold blue] ({url})",
        )
    )
    out.print("[bold]Headers:[/bold]", mask_headers(headers))
    if body:
        content_type = dict((k.lower(), v) for k, v in headers).get("content-type")
        out.print(
            Panel(
                Syntax(format_body(body), _lexer_for(content_type), theme="monokai"),
                title="[bold]Response Body[/bold]",
            )
        )
