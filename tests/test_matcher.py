"""Tests for switchyard.matching — compile() and the capture engine."""

import pytest

from switchyard.config import MatcherSettings, Modifier
from switchyard.matching.captures import Captures
from switchyard.matching.matcher import CompiledMatcher, compile
from switchyard.parsing.errors import ParseError, ParserErrorReason


class TestLiterals:
    @pytest.mark.parametrize("pattern", ["/", "/a", "/a/b/c", "/a?x=y", "/a#top", "#frag", "?q=1&r=2"])
    def test_literal_pattern_matches_itself(self, pattern: str) -> None:
        captures = compile(pattern).match(pattern)
        assert captures == {}
        assert captures.positional == ()  # type: ignore[union-attr]

    def test_literal_mismatch(self) -> None:
        assert compile("/a/b").match("/a/c") is None

    def test_case_sensitive_by_default(self) -> None:
        assert compile("/hello").match("/HeLLo") is None

    def test_case_insensitive_modifier(self) -> None:
        assert compile("/hello", Modifier.CASE_INSENSITIVE).match("/HeLLo") == {}

    def test_optional_trailing_slash(self) -> None:
        assert compile("/a").match("/a/") == {}

    def test_strict_has_no_trailing_slash(self) -> None:
        assert compile("/a", Modifier.STRICT).match("/a/") is None
        assert compile("/a", MatcherSettings(strict=True)).match("/a") == {}

    def test_complete_rejects_leftover(self) -> None:
        assert compile("/a").match("/ab") is None

    def test_incomplete_allows_leftover(self) -> None:
        assert compile("/a", Modifier.INCOMPLETE).match("/a/b") == {}


class TestSingleCaptures:
    def test_named_capture(self) -> None:
        assert compile("/{name}").match("/general_kenobi") == {"name": "general_kenobi"}

    def test_unnamed_capture_cannot_cross_separator(self) -> None:
        assert compile("/{}/kenobi").match("/hello/there/general/kenobi") is None

    def test_unnamed_capture_is_positional_only(self) -> None:
        captures = compile("/{}/kenobi").match("/hello/kenobi")
        assert captures == {}
        assert captures is not None
        assert captures.positional == ("hello",)

    def test_capture_between_literals(self) -> None:
        assert compile("/variant{item}stuff").match("/variantloremstuff") == {"item": "lorem"}

    def test_leftmost_minimal_delimiter(self) -> None:
        captures = compile("/{x}ipsum{y}").match("/loremipsumipsumdolor")
        assert captures == {"x": "lorem", "y": "ipsumdolor"}

    def test_repeated_name_keeps_both_positionally(self) -> None:
        captures = compile("#{cap}ipsum{cap}").match("#loremipsumdolor")
        assert captures is not None
        assert captures.positional == ("lorem", "dolor")
        assert captures["cap"] == "dolor"

    def test_empty_capture_fails(self) -> None:
        assert compile("/users/{id}").match("/users/") is None

    def test_whitespace_is_not_captured(self) -> None:
        assert compile("/{a}").match("/a b") is None

    def test_two_segments(self) -> None:
        assert compile("/{a}/{b}").match("/x/y") == {"a": "x", "b": "y"}

    def test_delimiter_after_capture_missing(self) -> None:
        assert compile("/{a}.html").match("/page") is None
        assert compile("/{a}.html").match("/page.html") == {"a": "page"}

    def test_case_insensitive_delimiter(self) -> None:
        matcher = compile("/{a}.HTML", Modifier.CASE_INSENSITIVE)
        assert matcher.match("/Page.html") == {"a": "Page"}

    def test_allowed_values(self) -> None:
        matcher = compile("/{kind(cats|dogs)}")
        assert matcher.match("/cats") == {"kind": "cats"}
        assert matcher.match("/birds") is None

    def test_allowed_values_case_insensitive(self) -> None:
        matcher = compile("/{kind(cats|dogs)}", Modifier.CASE_INSENSITIVE)
        assert matcher.match("/CATS") == {"kind": "CATS"}


class TestManyCaptures:
    def test_many_named_spans_segments(self) -> None:
        assert compile("/{*:x}/kenobi").match("/a/b/kenobi") == {"x": "a/b"}

    def test_many_to_end(self) -> None:
        assert compile("/files/{*:path}").match("/files/a/b.txt") == {"path": "a/b.txt"}

    def test_many_may_be_empty_at_end(self) -> None:
        assert compile("/files/{*:path}").match("/files/") == {"path": ""}

    def test_many_unnamed(self) -> None:
        captures = compile("/{*}/end").match("/a/b/c/end")
        assert captures == {}
        assert captures is not None
        assert captures.positional == ("a/b/c",)

    def test_many_stops_at_query(self) -> None:
        matcher = compile("/{*:path}", Modifier.INCOMPLETE)
        result = matcher.match_prefix("/a/b?x=1")
        assert result is not None
        captures, rest = result
        assert captures == {"path": "a/b"}
        assert rest == "?x=1"


class TestNumberedCaptures:
    def test_numbered_before_literal(self) -> None:
        captures = compile("/{3}/a").match("/g1/g2/g3/a")
        assert captures is not None
        assert captures.positional == ("g1/g2/g3",)

    def test_numbered_to_end_consumes_everything(self) -> None:
        result = compile("/{3}").match_prefix("/g1/g2/g3")
        assert result is not None
        assert result[1] == ""
        assert compile("/{3}").match("/g1/g2/g3") is not None

    def test_numbered_named_joins_sections(self) -> None:
        assert compile("/{2:pair}/end").match("/a/b/end") == {"pair": "a/b"}

    def test_numbered_too_few_sections(self) -> None:
        assert compile("/{3:p}").match("/g1/g2") is None

    def test_numbered_too_many_sections(self) -> None:
        assert compile("/{2:p}").match("/a/b/c") is None


class TestOptionalGroups:
    def test_optional_literal(self) -> None:
        matcher = compile("/lorem(/ipsum)")
        assert matcher.match("/lorem") == {}
        assert matcher.match("/lorem/ipsum") == {}

    def test_optional_capture(self) -> None:
        matcher = compile("/lorem(/{ipsum})")
        assert matcher.match("/lorem") == {}
        assert matcher.match("/lorem/dolor") == {"ipsum": "dolor"}

    def test_matching_twice_gives_equal_captures(self) -> None:
        matcher = compile("/lorem(/{ipsum})")
        assert matcher.match("/lorem/dolor") == matcher.match("/lorem/dolor")

    def test_capture_delimited_by_optional(self) -> None:
        matcher = compile("/{a}(-{b})")
        assert matcher.match("/x-y") == {"a": "x", "b": "y"}
        assert matcher.match("/x") == {"a": "x"}

    def test_consecutive_optionals(self) -> None:
        matcher = compile("/users(/{id})(/{tab})")
        assert matcher.match("/users") == {}
        assert matcher.match("/users/42") == {"id": "42"}
        assert matcher.match("/users/42/posts") == {"id": "42", "tab": "posts"}

    def test_failed_optional_leaves_position(self) -> None:
        assert compile("/a(/b/c)").match("/a/b") is None


class TestQueryFragmentEnd:
    def test_query_capture(self) -> None:
        matcher = compile("/search?q={term}")
        assert matcher.match("/search?q=cats") == {"term": "cats"}
        assert matcher.match("/search/?q=cats") == {"term": "cats"}

    def test_query_pairs(self) -> None:
        matcher = compile("/s?q={q}&page={page}")
        assert matcher.match("/s?q=a&page=2") == {"q": "a", "page": "2"}

    def test_fragment_capture(self) -> None:
        assert compile("#{section}").match("#intro") == {"section": "intro"}

    def test_end_token_with_incomplete(self) -> None:
        matcher = compile("/a!", Modifier.INCOMPLETE)
        assert matcher.match("/a") == {}
        assert matcher.match("/ab") is None

    def test_end_token_rejects_trailing_slash(self) -> None:
        assert compile("/a!").match("/a/") is None


class TestCompiledMatcher:
    def test_capture_names(self) -> None:
        matcher = compile("/{a}(/{b})?x={c}")
        assert matcher.capture_names() == frozenset({"a", "b", "c"})
        assert matcher.required_capture_names() == frozenset({"a", "c"})
        assert matcher.capture_count() == 2

    def test_unnamed_not_in_capture_names(self) -> None:
        assert compile("/{}/{*}/{name}").capture_names() == frozenset({"name"})

    def test_settings_recorded(self) -> None:
        matcher = compile("/a", Modifier.STRICT | Modifier.CASE_INSENSITIVE)
        assert matcher.settings == MatcherSettings(strict=True, case_insensitive=True)

    def test_default_settings(self) -> None:
        assert compile("/a").settings == MatcherSettings()

    def test_invalid_settings_type(self) -> None:
        with pytest.raises(TypeError):
            compile("/a", "strict")  # type: ignore[arg-type]

    def test_compile_raises_parse_error(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            compile("/a//b")
        assert exc_info.value.reason is ParserErrorReason.DOUBLE_SLASH

    def test_matcher_is_frozen(self) -> None:
        import dataclasses

        matcher = compile("/a")
        assert isinstance(matcher, CompiledMatcher)
        with pytest.raises(dataclasses.FrozenInstanceError):
            matcher.pattern = "/b"  # type: ignore[misc]


class TestCaptures:
    def test_mapping_view(self) -> None:
        captures = Captures([("a", "1"), (None, "x"), ("b", "2")])
        assert dict(captures) == {"a": "1", "b": "2"}
        assert len(captures) == 2
        assert "a" in captures

    def test_positional_view(self) -> None:
        captures = Captures([("a", "1"), (None, "x"), ("b", "2")])
        assert captures.positional == ("1", "x", "2")

    def test_equality_includes_unnamed(self) -> None:
        assert Captures([(None, "x")]) != Captures([(None, "y")])
        assert Captures([(None, "x")]) == {}

    def test_repr(self) -> None:
        assert repr(Captures([("a", "1")])) == "Captures({'a': '1'})"
        assert "unnamed=['x']" in repr(Captures([(None, "x")]))
