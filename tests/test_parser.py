"""Tests for switchyard.parsing.parser — matcher strings to tokens."""

import pytest

from switchyard.parsing.errors import ExpectedToken, ParseError, ParserErrorReason
from switchyard.parsing.parser import parse
from switchyard.parsing.tokens import (
    Capture,
    End,
    FragmentBegin,
    Literal,
    ManyNamed,
    ManyUnnamed,
    Named,
    NumberedNamed,
    NumberedUnnamed,
    OptionalGroup,
    QueryBegin,
    QueryCapture,
    QuerySeparator,
    Separator,
    Unnamed,
    token_source,
)


def _error(pattern: str) -> ParseError:
    with pytest.raises(ParseError) as exc_info:
        parse(pattern)
    return exc_info.value


class TestParsePath:
    def test_literal_path(self) -> None:
        assert parse("/users/list") == [
            Separator(),
            Literal("users"),
            Separator(),
            Literal("list"),
        ]

    def test_named_capture(self) -> None:
        assert parse("/users/{id}") == [
            Separator(),
            Literal("users"),
            Separator(),
            Capture(Named("id")),
        ]

    @pytest.mark.parametrize(
        ("pattern", "variant"),
        [
            ("{}", Unnamed()),
            ("{*}", ManyUnnamed()),
            ("{*:rest}", ManyNamed("rest")),
            ("{3}", NumberedUnnamed(3)),
            ("{3:path}", NumberedNamed(3, "path")),
            ("{name}", Named("name")),
            ("{_private2}", Named("_private2")),
        ],
    )
    def test_capture_variants(self, pattern: str, variant: object) -> None:
        assert parse(pattern) == [Capture(variant)]  # type: ignore[arg-type]

    def test_allowed_values(self) -> None:
        assert parse("/{kind(cats|dogs)}") == [
            Separator(),
            Capture(Named("kind"), ("cats", "dogs")),
        ]

    def test_unnamed_allowed_values(self) -> None:
        assert parse("/{(a|b)}") == [Separator(), Capture(Unnamed(), ("a", "b"))]

    def test_literal_between_captures(self) -> None:
        assert parse("/{a}-{b}") == [
            Separator(),
            Capture(Named("a")),
            Literal("-"),
            Capture(Named("b")),
        ]

    def test_brace_escapes(self) -> None:
        assert parse("/{{id}}") == [Separator(), Literal("{id}")]

    def test_end_token(self) -> None:
        assert parse("/a!") == [Separator(), Literal("a"), End()]

    def test_trailing_slash(self) -> None:
        assert parse("/a/") == [Separator(), Literal("a"), Separator()]


class TestParseQueryAndFragment:
    def test_query_literal(self) -> None:
        assert parse("?lorem=ipsum") == [QueryBegin(), QueryCapture("lorem", "ipsum")]

    def test_query_capture_and_separator(self) -> None:
        assert parse("/search?q={term}&page=1") == [
            Separator(),
            Literal("search"),
            QueryBegin(),
            QueryCapture("q", Capture(Named("term"))),
            QuerySeparator(),
            QueryCapture("page", "1"),
        ]

    def test_fragment(self) -> None:
        assert parse("#intro") == [FragmentBegin(), Literal("intro")]

    def test_fragment_capture(self) -> None:
        assert parse("/docs#{section}") == [
            Separator(),
            Literal("docs"),
            FragmentBegin(),
            Capture(Named("section")),
        ]

    def test_query_then_fragment_then_end(self) -> None:
        tokens = parse("?a=b#c!")
        assert tokens == [QueryBegin(), QueryCapture("a", "b"), FragmentBegin(), Literal("c"), End()]


class TestParseOptional:
    def test_optional_group(self) -> None:
        assert parse("/a(/{b})") == [
            Separator(),
            Literal("a"),
            OptionalGroup((Separator(), Capture(Named("b")))),
        ]

    def test_leading_optional_group(self) -> None:
        assert parse("(/a)") == [OptionalGroup((Separator(), Literal("a")))]

    def test_consecutive_optional_groups(self) -> None:
        tokens = parse("/a(/b)(/c)")
        assert tokens[2:] == [
            OptionalGroup((Separator(), Literal("b"))),
            OptionalGroup((Separator(), Literal("c"))),
        ]

    def test_nested_optional_group(self) -> None:
        assert parse("/a(/b(/c))") == [
            Separator(),
            Literal("a"),
            OptionalGroup((Separator(), Literal("b"), OptionalGroup((Separator(), Literal("c"))))),
        ]

    def test_optional_before_query(self) -> None:
        tokens = parse("/a(/b)?x=y")
        assert tokens[-2:] == [QueryBegin(), QueryCapture("x", "y")]

    def test_optional_in_fragment(self) -> None:
        assert parse("#a(-{b})") == [
            FragmentBegin(),
            Literal("a"),
            OptionalGroup((Literal("-"), Capture(Named("b")))),
        ]


class TestParseErrors:
    def test_empty_pattern(self) -> None:
        error = _error("")
        assert error.reason is None
        assert error.offset == 0
        assert ExpectedToken.SEPARATOR in error.expected

    def test_double_slash_at_start(self) -> None:
        error = _error("//")
        assert error.reason is ParserErrorReason.DOUBLE_SLASH
        assert error.offset == 1

    def test_double_slash_mid_path(self) -> None:
        error = _error("/a//b")
        assert error.reason is ParserErrorReason.DOUBLE_SLASH
        assert error.offset == 3

    @pytest.mark.parametrize(
        "pattern",
        [
            "/path{}{match}",
            "/path{match}{}",
            "/path{}{}",
            "/path{a}{b}",
            "/path{*}{a}",
            "/path{a}{*:b}",
            "/path{3}{a}",
            "/path{a}{2:b}",
        ],
    )
    def test_adjacent_captures(self, pattern: str) -> None:
        error = _error(pattern)
        assert error.reason is ParserErrorReason.ADJACENT_CAPTURES
        assert error.offset == pattern.index("}{") + 1

    def test_adjacent_captures_across_optional(self) -> None:
        error = _error("/{a}({b})")
        assert error.reason is ParserErrorReason.ADJACENT_CAPTURES
        assert error.offset == 5

    def test_adjacent_captures_between_optionals(self) -> None:
        error = _error("/a(/{b})({c})")
        assert error.reason is ParserErrorReason.ADJACENT_CAPTURES
        assert error.offset == 9

    def test_double_slash_into_optional(self) -> None:
        error = _error("/a/(/b)")
        assert error.reason is ParserErrorReason.DOUBLE_SLASH
        assert error.offset == 4

    def test_adjacent_captures_in_fragment(self) -> None:
        error = _error("#{a}{b}")
        assert error.reason is ParserErrorReason.ADJACENT_CAPTURES

    def test_and_before_question(self) -> None:
        assert _error("&a=b").reason is ParserErrorReason.AND_BEFORE_QUESTION
        error = _error("/a&b=c")
        assert error.reason is ParserErrorReason.AND_BEFORE_QUESTION
        assert error.offset == 2

    def test_multiple_questions(self) -> None:
        error = _error("?a=b?c=d")
        assert error.reason is ParserErrorReason.MULTIPLE_QUESTIONS
        assert error.offset == 4

    def test_tokens_after_end(self) -> None:
        error = _error("/a!/b")
        assert error.reason is ParserErrorReason.TOKENS_AFTER_END
        assert error.offset == 3
        assert error.expected == frozenset()

    def test_bad_identifier(self) -> None:
        error = _error("/{a-b}")
        assert error.reason is ParserErrorReason.BAD_IDENTIFIER
        assert error.bad_char == "-"
        assert error.offset == 3

    def test_identifier_starting_with_digit(self) -> None:
        error = _error("/{1a}")
        assert error.reason is ParserErrorReason.BAD_IDENTIFIER
        assert error.bad_char == "1"
        assert error.offset == 2

    def test_zero_sections(self) -> None:
        error = _error("/{0:path}")
        assert error.reason is ParserErrorReason.ZERO_SECTIONS
        assert error.offset == 2

    def test_empty_optional(self) -> None:
        error = _error("/a()")
        assert error.reason is ParserErrorReason.EMPTY_OPTIONAL
        assert error.offset == 3

    def test_unclosed_optional(self) -> None:
        error = _error("/a(/b")
        assert error.reason is ParserErrorReason.UNCLOSED_OPTIONAL
        assert error.offset == 5
        assert ExpectedToken.OPTIONAL_CLOSE in error.expected

    def test_concrete_after_optional(self) -> None:
        error = _error("/a(/b)/c")
        assert error.reason is ParserErrorReason.CONCRETE_AFTER_OPTIONAL
        assert error.offset == 6

    def test_query_inside_optional(self) -> None:
        error = _error("/a(?b=c)")
        assert error.reason is ParserErrorReason.SECTION_IN_OPTIONAL
        assert error.offset == 3

    def test_optional_in_query_rejected(self) -> None:
        error = _error("?a=b(&c=d)")
        assert error.reason is None
        assert error.offset == 4

    def test_stray_close_paren(self) -> None:
        error = _error("/a)")
        assert error.reason is None
        assert error.offset == 2

    def test_stray_equals(self) -> None:
        error = _error("/a=b")
        assert error.reason is None
        assert error.offset == 2

    def test_unterminated_capture(self) -> None:
        error = _error("/{a")
        assert error.reason is None
        assert error.expected == frozenset({ExpectedToken.CLOSE_BRACKET})
        assert error.offset == 3

    def test_query_key_without_value(self) -> None:
        error = _error("?a")
        assert error.offset == 2
        assert ExpectedToken.QUERY_LITERAL in error.expected

    def test_many_capture_not_allowed_as_query_value(self) -> None:
        error = _error("?a={*:b}")
        assert error.offset == 3

    def test_separator_in_fragment(self) -> None:
        error = _error("#a/b")
        assert error.reason is None
        assert error.offset == 2

    def test_error_carries_pattern(self) -> None:
        assert _error("/a//b").pattern == "/a//b"


class TestTokenSource:
    @pytest.mark.parametrize(
        "pattern",
        [
            "/users/{id}",
            "/a(/{b})",
            "/search?q={term}&page=1#top!",
            "/{kind(cats|dogs)}",
            "/{*:rest}",
            "/{2:pair}/x",
            "/{{id}}",
        ],
    )
    def test_source_reproduces_pattern(self, pattern: str) -> None:
        assert "".join(token_source(t) for t in parse(pattern)) == pattern
