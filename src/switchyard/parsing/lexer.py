"""Lexical recognizers for matcher strings.

Each scanner takes the pattern and a start index and returns the
recognized value together with the index just past it.  Scanners only
recognize; whether the token is legal where it appears is decided by
``grammar.transition``.
"""

from switchyard.parsing.errors import (
    QUERY_PAIR_KINDS,
    ExpectedToken,
    ParseError,
    ParserErrorReason,
)
from switchyard.parsing.tokens import (
    Capture,
    ManyNamed,
    ManyUnnamed,
    Named,
    NumberedNamed,
    NumberedUnnamed,
    QueryCapture,
    Unnamed,
)

# Characters that end a literal run.
RESERVED = frozenset("/?&#={}!()")

_CLOSE = frozenset({ExpectedToken.CLOSE_BRACKET})


def scan_literal(text: str, pos: int) -> tuple[str, int]:
    """Read a literal run, resolving ``{{`` and ``}}`` escapes.

    Returns an empty string when *pos* is already at a reserved character.
    """
    chars: list[str] = []
    while pos < len(text):
        char = text[pos]
        if char in "{}" and text.startswith(char * 2, pos):
            chars.append(char)
            pos += 2
            continue
        if char in RESERVED:
            break
        chars.append(char)
        pos += 1
    return "".join(chars), pos


def is_escape(text: str, pos: int) -> bool:
    return text[pos] in "{}" and text.startswith(text[pos] * 2, pos)


def scan_capture(text: str, pos: int) -> tuple[Capture, int]:
    """Read a ``{...}`` block starting at the ``{`` at *pos*."""
    i = pos + 1
    if i >= len(text):
        raise _error(text, i, _capture_interior())

    char = text[i]
    if char == "*":
        i += 1
        if text.startswith(":", i):
            name, i = _scan_ident(text, i + 1)
            return Capture(ManyNamed(name)), _close(text, i)
        return Capture(ManyUnnamed()), _close(text, i)

    if char.isdigit():
        start = i
        while i < len(text) and text[i].isdigit():
            i += 1
        digits = text[start:i]
        if i < len(text) and (text[i].isalpha() or text[i] == "_"):
            # Identifiers can't start with a digit.
            raise ParseError(
                ParserErrorReason.BAD_IDENTIFIER,
                frozenset({ExpectedToken.IDENT}),
                start,
                text,
                bad_char=text[start],
            )
        if int(digits) == 0:
            raise ParseError(
                ParserErrorReason.ZERO_SECTIONS,
                frozenset({ExpectedToken.NUMBERED_CAPTURE}),
                start,
                text,
            )
        if text.startswith(":", i):
            name, i = _scan_ident(text, i + 1)
            return Capture(NumberedNamed(int(digits), name)), _close(text, i)
        return Capture(NumberedUnnamed(int(digits))), _close(text, i)

    variant: Named | Unnamed
    if char in "}(":
        variant = Unnamed()
    else:
        name, i = _scan_ident(text, i)
        variant = Named(name)

    allowed = None
    if text.startswith("(", i):
        allowed, i = _scan_allowed(text, i)
    return Capture(variant, allowed), _close(text, i)


def scan_query_pair(text: str, pos: int) -> tuple[QueryCapture, int]:
    """Read ``key=value`` or ``key={capture}`` starting at *pos*."""
    key, i = scan_literal(text, pos)
    if not key or not text.startswith("=", i):
        raise _error(text, i, QUERY_PAIR_KINDS)
    i += 1

    if text.startswith("{", i) and not is_escape(text, i):
        start = i
        capture, i = scan_capture(text, i)
        if not isinstance(capture.variant, Named | Unnamed):
            raise _error(text, start, frozenset({ExpectedToken.CAPTURE}))
        return QueryCapture(key, capture), i

    value, i = scan_literal(text, i)
    if not value:
        raise _error(text, i, frozenset({ExpectedToken.LITERAL, ExpectedToken.CAPTURE}))
    return QueryCapture(key, value), i


def _scan_ident(text: str, pos: int) -> tuple[str, int]:
    """Read an identifier up to the closing ``}`` or an allowed-values list."""
    end = pos
    while end < len(text) and text[end] not in "}(":
        end += 1
    name = text[pos:end]
    if not name:
        raise _error(text, pos, frozenset({ExpectedToken.IDENT}))
    for k in range(len(name)):
        if not name[: k + 1].isidentifier():
            raise ParseError(
                ParserErrorReason.BAD_IDENTIFIER,
                frozenset({ExpectedToken.IDENT}),
                pos + k,
                text,
                bad_char=name[k],
            )
    return name, end


def _scan_allowed(text: str, pos: int) -> tuple[tuple[str, ...], int]:
    """Read ``(a|b|c)`` starting at the ``(`` at *pos*."""
    values: list[str] = []
    i = pos + 1
    start = i
    while True:
        if i >= len(text) or text[i] in "{}()":
            if i < len(text) and text[i] == ")" and i > start:
                values.append(text[start:i])
                return tuple(values), i + 1
            raise _error(text, i, frozenset({ExpectedToken.LITERAL, ExpectedToken.OPTIONAL_CLOSE}))
        if text[i] == "|":
            if i == start:
                raise _error(text, i, frozenset({ExpectedToken.LITERAL}))
            values.append(text[start:i])
            start = i + 1
        i += 1


def _close(text: str, pos: int) -> int:
    if not text.startswith("}", pos):
        raise _error(text, pos, _CLOSE)
    return pos + 1


def _capture_interior() -> frozenset[ExpectedToken]:
    return frozenset({ExpectedToken.IDENT, ExpectedToken.CLOSE_BRACKET})


def _error(text: str, offset: int, expected: frozenset[ExpectedToken]) -> ParseError:
    return ParseError(None, expected, offset, text)
