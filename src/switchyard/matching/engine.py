"""Capture engine.

Runs an optimized program against an input string, one token at a time,
without backtracking between tokens:

- ``Exact`` must be a prefix of the remaining input.
- A single-segment capture ends at the leftmost occurrence of any of its
  delimiters (see ``next_delimiters``).  With no delimiter ahead it takes
  the longest run of capture characters.
- ``{*}`` captures may also contain ``/``.
- ``{N}`` captures take ``N - 1`` segments each ending in ``/`` and then
  one final segment by the single-segment rule.
- An optional group either matches in full or leaves the position alone.
- ``End`` requires the input to be exhausted.
"""

import logging
from collections.abc import Sequence

from switchyard.config import MatcherSettings
from switchyard.matching.captures import Captures
from switchyard.parsing.optimizer import next_delimiters
from switchyard.parsing.tokens import (
    Capture,
    End,
    Exact,
    MatcherToken,
    OptionalGroup,
    is_many,
    sections,
)

logger = logging.getLogger("switchyard.matching")

# Never part of a captured value, besides whitespace.
INVALID_CAPTURE_CHARS = frozenset("/?&#={}")
INVALID_MANY_CAPTURE_CHARS = frozenset("?&#={}")

type _Entries = list[tuple[str | None, str]]


def match_program(
    program: Sequence[MatcherToken],
    text: str,
    settings: MatcherSettings,
) -> Captures | None:
    """Match all of *text* (or a prefix, when not ``complete``)."""
    result = _run(program, text, 0, settings)
    if result is None:
        return None
    entries, pos = result
    if settings.complete and pos != len(text):
        logger.debug("Rejected %r: %r left unconsumed", text, text[pos:])
        return None
    return Captures(entries)


def match_prefix(
    program: Sequence[MatcherToken],
    text: str,
    settings: MatcherSettings,
) -> tuple[Captures, str] | None:
    """Match a prefix of *text*, returning the captures and the rest."""
    result = _run(program, text, 0, settings)
    if result is None:
        return None
    entries, pos = result
    return Captures(entries), text[pos:]


def _run(
    program: Sequence[MatcherToken],
    text: str,
    pos: int,
    settings: MatcherSettings,
) -> tuple[_Entries, int] | None:
    entries: _Entries = []
    fold = settings.case_insensitive
    for index, token in enumerate(program):
        match token:
            case Exact(literal):
                if not _starts_with(text, literal, pos, fold=fold):
                    return None
                pos += len(literal)
            case OptionalGroup(inner):
                result = _run(inner, text, pos, settings)
                if result is not None:
                    entries.extend(result[0])
                    pos = result[1]
            case Capture():
                captured = _capture(token, program, index + 1, text, pos, fold=fold)
                if captured is None:
                    return None
                value, pos = captured
                entries.append((token.name, value))
            case End():
                if pos != len(text):
                    return None
    return entries, pos


def _capture(
    capture: Capture,
    program: Sequence[MatcherToken],
    following: int,
    text: str,
    pos: int,
    *,
    fold: bool,
) -> tuple[str, int] | None:
    pieces: list[str] = []
    for _ in range(sections(capture.variant) - 1):
        length = _valid_run(text, pos, many=False)
        if length == 0 or not text.startswith("/", pos + length):
            return None
        pieces.append(text[pos : pos + length])
        pos += length + 1

    end = _segment_end(capture, program, following, text, pos, fold=fold)
    if end is None:
        return None
    pieces.append(text[pos:end])
    value = "/".join(pieces)

    if capture.allowed is not None and not _is_allowed(value, capture.allowed, fold=fold):
        return None
    return value, end


def _segment_end(
    capture: Capture,
    program: Sequence[MatcherToken],
    following: int,
    text: str,
    pos: int,
    *,
    fold: bool,
) -> int | None:
    many = is_many(capture.variant)
    delimiters, open_ended = next_delimiters(program, following)

    hit = _find_first(text, delimiters, pos, fold=fold)
    if hit is not None and hit > pos and _is_valid(text, pos, hit, many=many):
        return hit
    if not open_ended:
        return None

    end = pos + _valid_run(text, pos, many=many)
    if end == pos and not (many and pos == len(text)):
        return None
    return end


def _find_first(text: str, delimiters: Sequence[str], pos: int, *, fold: bool) -> int | None:
    """Index of the leftmost occurrence of any delimiter at or after *pos*."""
    best: int | None = None
    for delimiter in delimiters:
        if fold:
            index = _find_folded(text, delimiter, pos)
        else:
            index = text.find(delimiter, pos)
        if index != -1 and (best is None or index < best):
            best = index
    return best


def _find_folded(text: str, needle: str, pos: int) -> int:
    width = len(needle)
    needle = needle.lower()
    for index in range(pos, len(text) - width + 1):
        if text[index : index + width].lower() == needle:
            return index
    return -1


def _starts_with(text: str, literal: str, pos: int, *, fold: bool) -> bool:
    if fold:
        return text[pos : pos + len(literal)].lower() == literal.lower()
    return text.startswith(literal, pos)


def _valid_run(text: str, pos: int, *, many: bool) -> int:
    """Length of the run of capture characters starting at *pos*."""
    invalid = INVALID_MANY_CAPTURE_CHARS if many else INVALID_CAPTURE_CHARS
    end = pos
    while end < len(text) and not (text[end] in invalid or text[end].isspace()):
        end += 1
    return end - pos


def _is_valid(text: str, start: int, end: int, *, many: bool) -> bool:
    return start + _valid_run(text, start, many=many) >= end


def _is_allowed(value: str, allowed: Sequence[str], *, fold: bool) -> bool:
    if fold:
        value = value.lower()
        return any(value == option.lower() for option in allowed)
    return value in allowed
