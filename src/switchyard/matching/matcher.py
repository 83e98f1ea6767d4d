"""Compiled matchers.

``compile()`` parses and optimizes a pattern once; the resulting
``CompiledMatcher`` is immutable and can be shared between threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from switchyard.config import MatcherSettings, Modifier, coerce_settings
from switchyard.matching.captures import Captures
from switchyard.matching.engine import match_prefix, match_program
from switchyard.parsing.optimizer import iter_captures, optimize
from switchyard.parsing.parser import parse
from switchyard.parsing.tokens import Capture, MatcherToken, Token

logger = logging.getLogger("switchyard.matching")


@dataclass(frozen=True, slots=True)
class CompiledMatcher:
    """A pattern ready to run against input strings.

    Usage::

        matcher = compile("/users/{id}")
        matcher.match("/users/42")      # Captures({'id': '42'})
        matcher.match("/posts/42")      # None
    """

    pattern: str
    tokens: tuple[Token, ...] = field(repr=False)
    program: tuple[MatcherToken, ...] = field(repr=False)
    settings: MatcherSettings = MatcherSettings()

    def match(self, text: str) -> Captures | None:
        """Match *text*, returning its captures, or None when it doesn't match."""
        return match_program(self.program, text, self.settings)

    def match_prefix(self, text: str) -> tuple[Captures, str] | None:
        """Match a prefix of *text*, returning the captures and the unconsumed rest."""
        return match_prefix(self.program, text, self.settings)

    def capture_names(self) -> frozenset[str]:
        """Names of every named capture, including those inside optional groups."""
        return frozenset(
            capture.name for capture in iter_captures(self.program) if capture.name is not None
        )

    def required_capture_names(self) -> frozenset[str]:
        """Names captured by every successful match (outside optional groups)."""
        return frozenset(
            token.name
            for token in self.program
            if isinstance(token, Capture) and token.name is not None
        )

    def capture_count(self) -> int:
        """Number of captures a match yields outside optional groups."""
        return sum(1 for token in self.program if isinstance(token, Capture))


def compile(  # noqa: A001
    pattern: str,
    settings: MatcherSettings | Modifier | None = None,
) -> CompiledMatcher:
    """Parse and optimize *pattern*.

    Raises ``ParseError`` when the pattern is malformed.
    """
    resolved = coerce_settings(settings)
    tokens = parse(pattern)
    program = optimize(tokens, optional_slash=not resolved.strict)
    logger.debug("Compiled %r -> %d matcher tokens", pattern, len(program))
    return CompiledMatcher(pattern, tuple(tokens), program, resolved)
