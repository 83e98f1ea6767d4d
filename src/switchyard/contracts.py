"""Static checks over a ``Switch`` route table.

Declaration already rejects fields no capture can ever fill.  These
checks look for the softer problems a table can have:

- **unconvertible fields** (error): a field type with no converter that
  is not a route type either, so it can never bind.
- **duplicate patterns** (warning): a variant declared after another with
  the same pattern and settings is unreachable.
- **unused captures** (warning): named captures no field consumes.
- **unit captures** (info): a field-less variant whose pattern captures
  values that are thrown away.

Usage::

    result = check_switch(AppRoute)
    if not result.ok:
        print(result.summary())

    # Or via CLI:
    #   switchyard check myapp.routes:AppRoute
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from switchyard.switch.binding import Layout
from switchyard.switch.converters import converter_for
from switchyard.switch.resolver import nested_resolver

if TYPE_CHECKING:
    from switchyard.switch.resolver import Switch

# ---------------------------------------------------------------------------
# Issue types
# ---------------------------------------------------------------------------


class Severity(Enum):
    """Severity of a contract validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class ContractIssue:
    """A single validation issue found during contract checking."""

    severity: Severity
    category: str
    message: str
    route: str | None = None
    details: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of a switch check."""

    issues: list[ContractIssue] = field(default_factory=list)
    variants_checked: int = 0
    captures_checked: int = 0

    @property
    def errors(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ContractIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [
            f"Checked {self.variants_checked} routes "
            f"with {self.captures_checked} captures.",
        ]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" in {issue.route}" if issue.route else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
            if issue.details:
                lines.append(f"           {issue.details}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_switch(switch_cls: type[Switch]) -> CheckResult:
    """Validate the route table of *switch_cls*."""
    result = CheckResult()
    variants = switch_cls.__switchyard_variants__
    result.variants_checked = len(variants)

    if not variants:
        result.issues.append(ContractIssue(
            severity=Severity.ERROR,
            category="setup",
            message=f"{switch_cls.__qualname__} declares no routes.",
        ))
        return result

    seen: dict[tuple[object, ...], str] = {}
    for variant in variants:
        name = variant.cls.__qualname__
        pattern = variant.pattern
        names = variant.matcher.capture_names()
        result.captures_checked += len(names)

        key = (variant.matcher.tokens, variant.matcher.settings)
        if key in seen:
            result.issues.append(ContractIssue(
                severity=Severity.WARNING,
                category="unreachable",
                message=f"{name} can never be selected.",
                route=pattern,
                details=f"{seen[key]} declares the same pattern earlier.",
            ))
        else:
            seen[key] = name

        for spec in variant.fields:
            if spec.is_state:
                continue
            if nested_resolver(spec.annotation) is None and converter_for(spec.annotation) is None:
                result.issues.append(ContractIssue(
                    severity=Severity.ERROR,
                    category="field",
                    message=f"{name}.{spec.name} has a type no capture converts to.",
                    route=pattern,
                    details=f"Annotation: {spec.annotation!r}",
                ))

        match variant.layout:
            case Layout.NAMED:
                consumed = {spec.name for spec in variant.fields}
                unused = sorted(names - consumed)
                if unused:
                    result.issues.append(ContractIssue(
                        severity=Severity.WARNING,
                        category="capture",
                        message=f"{name} ignores captures: {', '.join(unused)}.",
                        route=pattern,
                    ))
            case Layout.UNIT if variant.matcher.capture_count() or names:
                result.issues.append(ContractIssue(
                    severity=Severity.INFO,
                    category="capture",
                    message=f"{name} has no fields; captured values are discarded.",
                    route=pattern,
                ))

    return result
