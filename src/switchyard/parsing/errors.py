"""Pattern syntax errors.

A ``ParseError`` is what ``compile()`` raises for a malformed matcher
string.  It knows where the problem is (``offset`` into the pattern),
what the parser would have accepted there (``expected``) and, when the
grammar can say more than "unexpected character", why (``reason``).

``str(error)`` renders the pattern with a caret under the offending
character::

    Could not parse route.
    Route: /a//b
    ----------^
    Expected one of: "<literal>", "{<ident>}", ...
    Reason: Two slashes are not allowed next to each other (//).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from switchyard.errors import SwitchyardError


class ExpectedToken(Enum):
    """Kinds of syntax the parser can ask for, with their display form."""

    SEPARATOR = "/"
    LITERAL = "<literal>"
    CAPTURE = "{<ident>}"
    NUMBERED_CAPTURE = "{<number>:<ident>}"
    MANY_CAPTURE = "{*:<ident>}"
    QUERY_BEGIN = "?"
    QUERY_SEPARATOR = "&"
    QUERY_CAPTURE = "<literal>={<ident>}"
    QUERY_LITERAL = "<literal>=<literal>"
    FRAGMENT_BEGIN = "#"
    END = "!"
    OPTIONAL_OPEN = "("
    OPTIONAL_CLOSE = ")"
    CLOSE_BRACKET = "}"
    IDENT = "<ident>"

    def __str__(self) -> str:
        return self.value


CAPTURE_KINDS = frozenset({
    ExpectedToken.CAPTURE,
    ExpectedToken.NUMBERED_CAPTURE,
    ExpectedToken.MANY_CAPTURE,
})

QUERY_PAIR_KINDS = frozenset({ExpectedToken.QUERY_CAPTURE, ExpectedToken.QUERY_LITERAL})


class ParserErrorReason(Enum):
    """Why a token was rejected, beyond not being in the expected set."""

    TOKENS_AFTER_END = "tokens_after_end"
    DOUBLE_SLASH = "double_slash"
    AND_BEFORE_QUESTION = "and_before_question"
    ADJACENT_CAPTURES = "adjacent_captures"
    MULTIPLE_QUESTIONS = "multiple_questions"
    BAD_IDENTIFIER = "bad_identifier"
    ZERO_SECTIONS = "zero_sections"
    EMPTY_OPTIONAL = "empty_optional"
    UNCLOSED_OPTIONAL = "unclosed_optional"
    SECTION_IN_OPTIONAL = "section_in_optional"
    CONCRETE_AFTER_OPTIONAL = "concrete_after_optional"
    INVALID_STATE = "invalid_state"
    NOT_ALLOWED_STATE_TRANSITION = "not_allowed_state_transition"


_MESSAGES: dict[ParserErrorReason, str] = {
    ParserErrorReason.TOKENS_AFTER_END: "Characters appeared after the end token (!).",
    ParserErrorReason.DOUBLE_SLASH: "Two slashes are not allowed next to each other (//).",
    ParserErrorReason.AND_BEFORE_QUESTION: (
        "The first query must be indicated with a '?', not a '&'."
    ),
    ParserErrorReason.ADJACENT_CAPTURES: (
        "Capture groups can't be next to each other. "
        "There must be some character in between the '}' and '{' characters."
    ),
    ParserErrorReason.MULTIPLE_QUESTIONS: (
        "Query parameters can only be indicated with '?' once per route. "
        "Additional parameters are joined with '&'."
    ),
    ParserErrorReason.ZERO_SECTIONS: "A numbered capture must span at least one section.",
    ParserErrorReason.EMPTY_OPTIONAL: "Optional sections can't be empty.",
    ParserErrorReason.UNCLOSED_OPTIONAL: "Optional section is missing its closing ')'.",
    ParserErrorReason.SECTION_IN_OPTIONAL: (
        "Optional sections can't begin a query or a fragment, or end the route."
    ),
    ParserErrorReason.CONCRETE_AFTER_OPTIONAL: (
        "Only another optional section may follow an optional section "
        "before the query, fragment or end token."
    ),
    ParserErrorReason.INVALID_STATE: "Library error: the parser reached an invalid state.",
    ParserErrorReason.NOT_ALLOWED_STATE_TRANSITION: (
        "Library error: the parser produced a token its state machine does not allow."
    ),
}


@dataclass(frozen=True, slots=True)
class ParseError(SwitchyardError):
    """A matcher string could not be parsed.

    ``reason`` is None when the only thing known is that the character at
    ``offset`` is not one of ``expected``.  ``bad_char`` is set for
    identifier errors.
    """

    reason: ParserErrorReason | None
    expected: frozenset[ExpectedToken]
    offset: int
    pattern: str = ""
    bad_char: str | None = None

    @property
    def message(self) -> str | None:
        """Human explanation of ``reason``, if there is one."""
        if self.reason is None:
            return None
        if self.reason is ParserErrorReason.BAD_IDENTIFIER:
            return f"Identifier can't contain {self.bad_char!r}."
        return _MESSAGES[self.reason]

    def expected_display(self) -> str:
        ordered = [kind for kind in ExpectedToken if kind in self.expected]
        return ", ".join(f'"{kind}"' for kind in ordered)

    def render(self) -> str:
        lines = [
            "Could not parse route.",
            f"Route: {self.pattern}",
            "-" * (len("Route: ") + self.offset) + "^",
        ]
        if self.expected:
            lines.append(f"Expected one of: {self.expected_display()}")
        if self.message is not None:
            lines.append(f"Reason: {self.message}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
