"""Matcher configuration.

MatcherSettings is a frozen dataclass: immutable after creation and shared
freely between compiled matchers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto


class Modifier(Flag):
    """Shorthand flags accepted wherever settings are.

    ``compile("/hello", Modifier.CASE_INSENSITIVE | Modifier.STRICT)``
    """

    NONE = 0
    STRICT = auto()
    CASE_INSENSITIVE = auto()
    INCOMPLETE = auto()


@dataclass(frozen=True, slots=True)
class MatcherSettings:
    """Options for compiling and running a pattern.

    - ``strict``: no optional trailing ``/`` is added after path literals.
    - ``complete``: the whole input must be consumed for a match.
    - ``case_insensitive``: literal comparisons ignore case.
    """

    strict: bool = False
    complete: bool = True
    case_insensitive: bool = False

    @classmethod
    def from_modifiers(cls, modifiers: Modifier) -> MatcherSettings:
        return cls(
            strict=Modifier.STRICT in modifiers,
            complete=Modifier.INCOMPLETE not in modifiers,
            case_insensitive=Modifier.CASE_INSENSITIVE in modifiers,
        )


DEFAULT_SETTINGS = MatcherSettings()


def coerce_settings(settings: MatcherSettings | Modifier | None) -> MatcherSettings:
    """Normalize the accepted settings spellings to a ``MatcherSettings``."""
    if settings is None:
        return DEFAULT_SETTINGS
    if isinstance(settings, Modifier):
        return MatcherSettings.from_modifiers(settings)
    if isinstance(settings, MatcherSettings):
        return settings
    msg = f"Expected MatcherSettings or Modifier, got {type(settings).__name__}"
    raise TypeError(msg)
