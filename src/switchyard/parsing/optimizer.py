"""Token optimizer.

Condenses parse-time tokens into the program the capture engine runs:
every run of statically known characters (separators, literals, query
and fragment markers, query keys and literal query values) becomes a
single ``Exact``.  Captures, optional groups and the end marker are kept
as distinct tokens, so whatever follows a ``Capture`` is either a
concrete delimiter, an optional group or nothing.

With ``optional_slash`` an ``Optional(Exact("/"))`` is added where a path
may end, so ``/users`` also matches ``/users/``.
"""

from collections.abc import Iterable, Sequence

from switchyard.parsing.tokens import (
    Capture,
    End,
    Exact,
    FragmentBegin,
    Literal,
    MatcherToken,
    OptionalGroup,
    QueryBegin,
    QueryCapture,
    QuerySeparator,
    Separator,
    Token,
)

_OPTIONAL_SLASH = OptionalGroup((Exact("/"),))


def optimize(tokens: Sequence[Token], *, optional_slash: bool = False) -> tuple[MatcherToken, ...]:
    """Optimize parse-time *tokens* into matcher tokens."""
    optimized: list[MatcherToken] = []
    run: list[str] = []
    query_or_fragment_seen = False

    def flush() -> None:
        if run:
            optimized.append(Exact("".join(run)))
            run.clear()

    for index, token in enumerate(tokens):
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        match token:
            case QueryBegin() | FragmentBegin():
                query_or_fragment_seen = True
                run.append("?" if isinstance(token, QueryBegin) else "#")
            case Separator():
                run.append("/")
            case QuerySeparator():
                run.append("&")
            case Literal(text):
                run.append(text)
                if (
                    optional_slash
                    and not query_or_fragment_seen
                    and (following is None or isinstance(following, QueryBegin | FragmentBegin))
                ):
                    flush()
                    optimized.append(_OPTIONAL_SLASH)
            case OptionalGroup(inner):
                flush()
                optimized.append(OptionalGroup(optimize(inner)))
                if optional_slash and following is None:
                    optimized.append(_OPTIONAL_SLASH)
            case Capture():
                flush()
                optimized.append(token)
            case QueryCapture(key, Capture() as capture):
                run.append(f"{key}=")
                flush()
                optimized.append(capture)
            case QueryCapture(key, value):
                run.append(f"{key}={value}")
            case End():
                flush()
                optimized.append(token)
    flush()
    return tuple(optimized)


def iter_captures(program: Iterable[MatcherToken]) -> Iterable[Capture]:
    """Yield every capture in *program*, descending into optional groups."""
    for token in program:
        if isinstance(token, Capture):
            yield token
        elif isinstance(token, OptionalGroup):
            yield from iter_captures(token.tokens)


def next_delimiters(program: Sequence[MatcherToken], start: int) -> tuple[tuple[str, ...], bool]:
    """Find the literals that can end a capture whose next token is *start*.

    Collects the first literal of each following optional group and the
    first following top-level ``Exact``.  The flag is True when no
    top-level ``Exact`` follows, meaning the capture may also run to the
    end of the input.
    """
    delimiters: list[str] = []
    for token in program[start:]:
        match token:
            case Exact(literal):
                delimiters.append(literal)
                return tuple(delimiters), False
            case OptionalGroup(inner):
                first = _first_literal(inner)
                if first is not None:
                    delimiters.append(first)
            case _:
                break
    return tuple(delimiters), True


def _first_literal(program: Sequence[MatcherToken]) -> str | None:
    for token in program:
        match token:
            case Exact(literal):
                return literal
            case OptionalGroup(inner):
                found = _first_literal(inner)
                if found is not None:
                    return found
    return None
