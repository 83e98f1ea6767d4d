"""Terminal formatting for check results and pattern errors.

Produces structured, colored output for the ``switchyard`` command.
Respects TTY detection: no ANSI codes when piped or redirected.

Example output (with color)::

    ── switchyard check ─────────────────────────────────────────

      4 routes · 5 captures

      ▲  AppRoute.Legacy can never be selected.
         route /users/{id}
         AppRoute.User declares the same pattern earlier.

      ✓  No errors · 1 warning

    ─────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from switchyard.contracts import Severity

if TYPE_CHECKING:
    from switchyard.contracts import CheckResult, ContractIssue
    from switchyard.parsing.errors import ParseError

# Banner width
_W = 65

_RULE = "─"


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stderr
    isatty = getattr(s, "isatty", None)
    return bool(isatty and isatty())


class _Palette:
    """ANSI escape sequences, empty strings when color is disabled."""

    __slots__ = ("bold", "cyan", "dim", "green", "red", "reset", "yellow")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[0m"
            self.bold = "\033[1m"
            self.dim = "\033[2m"
            self.red = "\033[31m"
            self.green = "\033[32m"
            self.yellow = "\033[33m"
            self.cyan = "\033[36m"
        else:
            self.reset = ""
            self.bold = ""
            self.dim = ""
            self.red = ""
            self.green = ""
            self.yellow = ""
            self.cyan = ""


def _severity_icon(severity: Severity, c: _Palette) -> str:
    match severity:
        case Severity.ERROR:
            return f"{c.red}{c.bold}✗{c.reset}"
        case Severity.WARNING:
            return f"{c.yellow}▲{c.reset}"
        case Severity.INFO:
            return f"{c.dim}·{c.reset}"


def _format_issue(issue: ContractIssue, c: _Palette) -> list[str]:
    icon = _severity_icon(issue.severity, c)
    lines = [f"  {icon}  {c.bold}{issue.message}{c.reset}"]
    if issue.route:
        lines.append(f"     {c.dim}route{c.reset} {c.cyan}{issue.route}{c.reset}")
    if issue.details:
        lines.append(f"     {c.dim}{issue.details}{c.reset}")
    return lines


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def format_check_result(
    result: CheckResult,
    *,
    title: str = "switchyard check",
    color: bool | None = None,
) -> str:
    """Format a CheckResult for terminal display.

    Args:
        result: The check result to format.
        title: Banner title.
        color: Force color on/off.  ``None`` auto-detects from stdout,
            where ``switchyard check`` prints the result.
    """
    c = _Palette(enabled=color if color is not None else _use_color(sys.stdout))
    lines: list[str] = []

    pad = _W - len(title) - 4
    lines.append(f"  {c.dim}{_RULE * 2}{c.reset} {c.bold}{title}{c.reset} {c.dim}{_RULE * max(pad, 1)}{c.reset}")
    lines.append("")

    sep = f" {c.dim}·{c.reset} "
    stats = [
        f"{c.bold}{result.variants_checked}{c.reset} {c.dim}routes{c.reset}",
        f"{c.bold}{result.captures_checked}{c.reset} {c.dim}captures{c.reset}",
    ]
    lines.append(f"  {sep.join(stats)}")
    lines.append("")

    errors = result.errors
    warnings = result.warnings
    infos = [i for i in result.issues if i.severity == Severity.INFO]
    for group in (errors, warnings, infos):
        for issue in group:
            lines.extend(_format_issue(issue, c))
            lines.append("")

    if not errors and not warnings:
        lines.append(f"  {c.green}{c.bold}✓{c.reset}  {c.green}All clear{c.reset}")
    elif not errors:
        lines.append(
            f"  {c.green}{c.bold}✓{c.reset}  {c.green}No errors{c.reset}"
            f"{sep}{c.yellow}{_plural(len(warnings), 'warning')}{c.reset}"
        )
    else:
        lines.append(
            f"  {c.red}{c.bold}✗{c.reset}  {c.red}{_plural(len(errors), 'error')}{c.reset}"
            f"{sep}{c.yellow}{_plural(len(warnings), 'warning')}{c.reset}"
        )

    lines.append("")
    lines.append(f"  {c.dim}{_RULE * _W}{c.reset}")
    lines.append("")
    return "\n".join(lines)


def format_parse_error(error: ParseError, *, color: bool | None = None) -> str:
    """Render a ParseError with the caret and reason highlighted."""
    c = _Palette(enabled=color if color is not None else _use_color())
    prefix = "Route: "
    lines = [
        f"{c.red}{c.bold}Could not parse route.{c.reset}",
        f"{c.dim}{prefix}{c.reset}{error.pattern}",
        f"{c.dim}{'-' * (len(prefix) + error.offset)}{c.reset}{c.red}^{c.reset}",
    ]
    if error.expected:
        lines.append(f"{c.dim}Expected one of:{c.reset} {error.expected_display()}")
    if error.message is not None:
        lines.append(f"{c.yellow}Reason:{c.reset} {error.message}")
    return "\n".join(lines)
