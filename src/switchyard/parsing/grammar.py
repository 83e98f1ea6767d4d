"""Grammar state machine for matcher strings.

Recognition (which characters form a token) lives in ``lexer``; legality
(which token may follow which) lives here.  ``transition`` is a pure
function from ``(ParserState, Token)`` to the next state, raising
``TransitionError`` for illegal sequences.  ``expected`` lists what a
state would accept, for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from switchyard.parsing.errors import (
    CAPTURE_KINDS,
    QUERY_PAIR_KINDS,
    ExpectedToken,
    ParserErrorReason,
)
from switchyard.parsing.tokens import (
    Capture,
    End,
    FragmentBegin,
    Literal,
    OptionalGroup,
    QueryBegin,
    QueryCapture,
    QuerySeparator,
    Separator,
    Token,
)


class Section(Enum):
    """Which part of the route the parser is in."""

    NONE = "none"
    PATH = "path"
    FIRST_QUERY = "first_query"
    NTH_QUERY = "nth_query"
    FRAGMENT = "fragment"
    END = "end"


QUERY_SECTIONS = frozenset({Section.FIRST_QUERY, Section.NTH_QUERY})


@dataclass(frozen=True, slots=True)
class ParserState:
    section: Section = Section.NONE
    prev: Token | None = None


INITIAL_STATE = ParserState()


class TransitionError(Exception):
    """An illegal token sequence.  *reason* is None for a plain unexpected token."""

    def __init__(self, reason: ParserErrorReason | None) -> None:
        super().__init__(reason)
        self.reason = reason


def last_token(token: Token) -> Token:
    """The last token of *token* once optional groups are flattened."""
    while isinstance(token, OptionalGroup):
        token = token.tokens[-1]
    return token


def transition(state: ParserState, token: Token) -> ParserState:
    """Return the state after accepting *token* in *state*."""
    match state.section:
        case Section.NONE:
            return _from_none(token)
        case Section.PATH:
            return _from_path(state.prev, token)
        case Section.FIRST_QUERY | Section.NTH_QUERY:
            return _from_query(state, token)
        case Section.FRAGMENT:
            return _from_fragment(state.prev, token)
        case Section.END:
            raise TransitionError(ParserErrorReason.TOKENS_AFTER_END)
    raise TransitionError(ParserErrorReason.INVALID_STATE)


def _from_none(token: Token) -> ParserState:
    match token:
        case Separator() | Literal() | Capture() | OptionalGroup():
            return ParserState(Section.PATH, token)
        case QueryBegin():
            return ParserState(Section.FIRST_QUERY, token)
        case QuerySeparator():
            raise TransitionError(ParserErrorReason.AND_BEFORE_QUESTION)
        case FragmentBegin():
            return ParserState(Section.FRAGMENT, token)
        case End():
            return ParserState(Section.END, token)
    raise TransitionError(ParserErrorReason.NOT_ALLOWED_STATE_TRANSITION)


def _from_path(prev: Token | None, token: Token) -> ParserState:
    match token:
        case QueryBegin():
            return ParserState(Section.FIRST_QUERY, token)
        case QuerySeparator():
            raise TransitionError(ParserErrorReason.AND_BEFORE_QUESTION)
        case FragmentBegin():
            return ParserState(Section.FRAGMENT, token)
        case End():
            return ParserState(Section.END, token)
        case OptionalGroup():
            return ParserState(Section.PATH, token)
        case QueryCapture():
            raise TransitionError(ParserErrorReason.NOT_ALLOWED_STATE_TRANSITION)

    if isinstance(prev, OptionalGroup):
        raise TransitionError(ParserErrorReason.CONCRETE_AFTER_OPTIONAL)

    match (prev, token):
        case (Separator(), Separator()):
            raise TransitionError(ParserErrorReason.DOUBLE_SLASH)
        case (Capture(), Capture()):
            raise TransitionError(ParserErrorReason.ADJACENT_CAPTURES)
        case (_, Separator() | Literal() | Capture()):
            return ParserState(Section.PATH, token)
    raise TransitionError(ParserErrorReason.INVALID_STATE)


def _from_query(state: ParserState, token: Token) -> ParserState:
    awaiting_pair = isinstance(state.prev, QueryBegin | QuerySeparator)
    match token:
        case QueryBegin():
            raise TransitionError(ParserErrorReason.MULTIPLE_QUESTIONS)
        case QueryCapture() if awaiting_pair:
            return ParserState(state.section, token)
        case QuerySeparator() if not awaiting_pair:
            return ParserState(Section.NTH_QUERY, token)
        case FragmentBegin() if not awaiting_pair:
            return ParserState(Section.FRAGMENT, token)
        case End() if not awaiting_pair:
            return ParserState(Section.END, token)
    raise TransitionError(None)


def _from_fragment(prev: Token | None, token: Token) -> ParserState:
    match token:
        case End():
            return ParserState(Section.END, token)
        case OptionalGroup():
            return ParserState(Section.FRAGMENT, token)
        case Literal() | Capture() if isinstance(prev, OptionalGroup):
            raise TransitionError(ParserErrorReason.CONCRETE_AFTER_OPTIONAL)
        case Capture() if isinstance(prev, Capture):
            raise TransitionError(ParserErrorReason.ADJACENT_CAPTURES)
        case Literal() | Capture():
            return ParserState(Section.FRAGMENT, token)
    raise TransitionError(None)


def expected(state: ParserState, *, in_optional: bool = False) -> frozenset[ExpectedToken]:
    """The token kinds *state* would accept next."""
    kinds = set(_expected(state))
    if in_optional:
        kinds -= {
            ExpectedToken.QUERY_BEGIN,
            ExpectedToken.QUERY_SEPARATOR,
            ExpectedToken.FRAGMENT_BEGIN,
            ExpectedToken.END,
        }
        kinds.add(ExpectedToken.OPTIONAL_CLOSE)
    return frozenset(kinds)


def _expected(state: ParserState) -> set[ExpectedToken]:
    E = ExpectedToken
    section, prev = state.section, state.prev
    match section:
        case Section.NONE:
            return {E.SEPARATOR, E.LITERAL, *CAPTURE_KINDS, E.OPTIONAL_OPEN,
                    E.QUERY_BEGIN, E.FRAGMENT_BEGIN, E.END}
        case Section.PATH:
            tail = {E.OPTIONAL_OPEN, E.QUERY_BEGIN, E.FRAGMENT_BEGIN, E.END}
            match prev:
                case OptionalGroup():
                    return tail
                case Separator():
                    return {E.LITERAL, *CAPTURE_KINDS, *tail}
                case Capture():
                    return {E.SEPARATOR, E.LITERAL, *tail}
                case _:
                    return {E.SEPARATOR, *CAPTURE_KINDS, *tail}
        case Section.FIRST_QUERY | Section.NTH_QUERY:
            if isinstance(prev, QueryBegin | QuerySeparator):
                return set(QUERY_PAIR_KINDS)
            return {E.QUERY_SEPARATOR, E.FRAGMENT_BEGIN, E.END}
        case Section.FRAGMENT:
            match prev:
                case OptionalGroup():
                    return {E.OPTIONAL_OPEN, E.END}
                case Capture():
                    return {E.LITERAL, E.OPTIONAL_OPEN, E.END}
                case Literal():
                    return {*CAPTURE_KINDS, E.OPTIONAL_OPEN, E.END}
                case _:
                    return {E.LITERAL, *CAPTURE_KINDS, E.OPTIONAL_OPEN, E.END}
    return set()
