"""Matcher-string parser.

Drives the lexer over the pattern and feeds every recognized token
through ``grammar.transition`` before keeping it, so an illegal sequence
is reported at the first offending character.

Examples::

    parse("/users/{id}")   -> [Separator(), Literal("users"), Separator(), Capture(Named("id"))]
    parse("/a(/{b})")      -> [Separator(), Literal("a"), OptionalGroup((Separator(), Capture(...)))]
    parse("/a//b")         -> ParseError(reason=DOUBLE_SLASH, offset=3)
"""

import logging

from switchyard.parsing import lexer
from switchyard.parsing.errors import ExpectedToken, ParseError, ParserErrorReason
from switchyard.parsing.grammar import (
    INITIAL_STATE,
    QUERY_SECTIONS,
    ParserState,
    TransitionError,
    expected,
    last_token,
    transition,
)
from switchyard.parsing.tokens import (
    End,
    FragmentBegin,
    Literal,
    OptionalGroup,
    QueryBegin,
    QuerySeparator,
    Separator,
    Token,
)

logger = logging.getLogger("switchyard.parsing")

_SECTION_MARKERS: dict[str, type] = {
    "?": QueryBegin,
    "&": QuerySeparator,
    "#": FragmentBegin,
    "!": End,
}


def parse(pattern: str) -> list[Token]:
    """Parse *pattern* into tokens.  Raises ``ParseError`` when it is malformed."""
    if not pattern:
        raise ParseError(None, expected(INITIAL_STATE), 0, pattern)
    tokens = _Parser(pattern).parse()
    logger.debug("Parsed %r into %d tokens", pattern, len(tokens))
    return tokens


class _Parser:
    """Single-use recursive-descent driver over one pattern."""

    __slots__ = ("pattern", "pos")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.pos = 0

    def parse(self) -> list[Token]:
        tokens, state = self._sequence(INITIAL_STATE, in_optional=False)
        if self.pos < len(self.pattern):
            # Only a stray ')' stops a top-level sequence early.
            raise self._error(None, expected(state), self.pos)
        return tokens

    def _sequence(self, state: ParserState, *, in_optional: bool) -> tuple[list[Token], ParserState]:
        tokens: list[Token] = []
        text = self.pattern
        while self.pos < len(text):
            if text[self.pos] == ")":
                break
            start = self.pos
            if text[self.pos] == "(":
                token = self._optional(state)
            else:
                token = self._next_token(state)
                if in_optional and isinstance(token, QueryBegin | QuerySeparator | FragmentBegin | End):
                    raise self._error(
                        ParserErrorReason.SECTION_IN_OPTIONAL,
                        expected(state, in_optional=True),
                        start,
                    )
            state = self._feed(state, token, start, in_optional=in_optional)
            tokens.append(token)
        return tokens, state

    def _next_token(self, state: ParserState) -> Token:
        text, start = self.pattern, self.pos
        char = text[start]

        if (
            state.section in QUERY_SECTIONS
            and isinstance(state.prev, QueryBegin | QuerySeparator)
            and char not in _SECTION_MARKERS
        ):
            token, self.pos = lexer.scan_query_pair(text, start)
            return token

        if char in _SECTION_MARKERS:
            self.pos += 1
            return _SECTION_MARKERS[char]()
        if char == "/":
            self.pos += 1
            return Separator()
        if char == "{" and not lexer.is_escape(text, start):
            token, self.pos = lexer.scan_capture(text, start)
            return token

        literal, end = lexer.scan_literal(text, start)
        if not literal:
            # '=', a lone '}' or a ')' with no group open.
            raise self._error(None, expected(state), start)
        self.pos = end
        return Literal(literal)

    def _optional(self, state: ParserState) -> OptionalGroup[Token]:
        start = self.pos
        # Reject the group itself first (e.g. inside a query or after '!').
        self._feed(state, OptionalGroup(()), start, in_optional=False)
        self.pos += 1

        prev = last_token(state.prev) if isinstance(state.prev, OptionalGroup) else state.prev
        inner_state = ParserState(state.section, prev)
        tokens, inner_state = self._sequence(inner_state, in_optional=True)

        if self.pos >= len(self.pattern):
            raise self._error(
                ParserErrorReason.UNCLOSED_OPTIONAL,
                expected(inner_state, in_optional=True),
                self.pos,
            )
        if not tokens:
            raise self._error(
                ParserErrorReason.EMPTY_OPTIONAL,
                frozenset({ExpectedToken.SEPARATOR, ExpectedToken.LITERAL}),
                self.pos,
            )
        self.pos += 1
        return OptionalGroup(tuple(tokens))

    def _feed(self, state: ParserState, token: Token, offset: int, *, in_optional: bool) -> ParserState:
        try:
            return transition(state, token)
        except TransitionError as exc:
            raise self._error(exc.reason, expected(state, in_optional=in_optional), offset) from None

    def _error(
        self,
        reason: ParserErrorReason | None,
        kinds: frozenset[ExpectedToken],
        offset: int,
    ) -> ParseError:
        return ParseError(reason, kinds, offset, self.pattern)
