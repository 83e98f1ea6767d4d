"""Token types produced by the parser and the optimizer.

Parse-time tokens mirror the pattern text one construct at a time.
Matcher tokens are what the optimizer hands to the capture engine:
literal runs coalesced into ``Exact``, captures and optional groups kept
distinct.
"""

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Capture variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Unnamed:
    """``{}``: one segment, value discarded from the named view."""


@dataclass(frozen=True, slots=True)
class ManyUnnamed:
    """``{*}``: any number of segments."""


@dataclass(frozen=True, slots=True)
class NumberedUnnamed:
    """``{3}``: exactly *sections* segments."""

    sections: int


@dataclass(frozen=True, slots=True)
class Named:
    """``{name}``"""

    name: str


@dataclass(frozen=True, slots=True)
class ManyNamed:
    """``{*:name}``"""

    name: str


@dataclass(frozen=True, slots=True)
class NumberedNamed:
    """``{3:name}``"""

    sections: int
    name: str


type CaptureVariant = Unnamed | ManyUnnamed | NumberedUnnamed | Named | ManyNamed | NumberedNamed


def variant_name(variant: CaptureVariant) -> str | None:
    """The capture key for *variant*, or None for the unnamed forms."""
    match variant:
        case Named(name) | ManyNamed(name) | NumberedNamed(_, name):
            return name
        case _:
            return None


def is_many(variant: CaptureVariant) -> bool:
    return isinstance(variant, ManyUnnamed | ManyNamed)


def sections(variant: CaptureVariant) -> int:
    """Number of path segments a numbered capture spans (1 otherwise)."""
    match variant:
        case NumberedUnnamed(n) | NumberedNamed(n, _):
            return n
        case _:
            return 1


def variant_source(variant: CaptureVariant) -> str:
    """Render the interior of a capture block (``*:name``, ``3``, ...)."""
    match variant:
        case Unnamed():
            return ""
        case ManyUnnamed():
            return "*"
        case NumberedUnnamed(n):
            return str(n)
        case Named(name):
            return name
        case ManyNamed(name):
            return f"*:{name}"
        case NumberedNamed(n, name):
            return f"{n}:{name}"


# ---------------------------------------------------------------------------
# Parse-time tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Separator:
    """``/``"""


@dataclass(frozen=True, slots=True)
class Literal:
    """A run of plain characters, escapes already resolved."""

    text: str


@dataclass(frozen=True, slots=True)
class Capture:
    """A capture block.  *allowed* restricts the values it accepts."""

    variant: CaptureVariant
    allowed: tuple[str, ...] | None = None

    @property
    def name(self) -> str | None:
        return variant_name(self.variant)

    def source(self) -> str:
        inner = variant_source(self.variant)
        if self.allowed is not None:
            inner += "(" + "|".join(self.allowed) + ")"
        return "{" + inner + "}"


@dataclass(frozen=True, slots=True)
class QueryBegin:
    """``?``"""


@dataclass(frozen=True, slots=True)
class QuerySeparator:
    """``&``"""


@dataclass(frozen=True, slots=True)
class QueryCapture:
    """``key=value`` or ``key={capture}`` inside the query section."""

    key: str
    value: str | Capture


@dataclass(frozen=True, slots=True)
class FragmentBegin:
    """``#``"""


@dataclass(frozen=True, slots=True)
class End:
    """``!``: the input must end here."""


@dataclass(frozen=True, slots=True)
class OptionalGroup[T]:
    """``( ... )``: a sub-sequence that may be absent."""

    tokens: tuple[T, ...]


type Token = (
    Separator
    | Literal
    | Capture
    | QueryBegin
    | QuerySeparator
    | QueryCapture
    | FragmentBegin
    | End
    | OptionalGroup[Token]
)


def token_source(token: Token) -> str:
    """Render *token* back to pattern text."""
    match token:
        case Separator():
            return "/"
        case Literal(text):
            return text.replace("{", "{{").replace("}", "}}")
        case Capture():
            return token.source()
        case QueryBegin():
            return "?"
        case QuerySeparator():
            return "&"
        case QueryCapture(key, Capture() as capture):
            return f"{key}={capture.source()}"
        case QueryCapture(key, value):
            return f"{key}={value}"
        case FragmentBegin():
            return "#"
        case End():
            return "!"
        case OptionalGroup(tokens):
            return "(" + "".join(token_source(t) for t in tokens) + ")"
    msg = f"Unknown token: {token!r}"
    raise TypeError(msg)


# ---------------------------------------------------------------------------
# Matcher tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Exact:
    """Literal text the input must start with."""

    literal: str


type MatcherToken = Exact | Capture | OptionalGroup[MatcherToken] | End


def describe(token: MatcherToken) -> str:
    """One-line description of a matcher token, used by ``switchyard parse``."""
    match token:
        case Exact(literal):
            return f"Exact({literal!r})"
        case Capture(variant, allowed):
            text = f"Capture({variant!r})"
            if allowed is not None:
                text += f" allowed={list(allowed)!r}"
            return text
        case OptionalGroup(tokens):
            return "Optional[" + ", ".join(describe(t) for t in tokens) + "]"
        case End():
            return "End"
    msg = f"Unknown matcher token: {token!r}"
    raise TypeError(msg)
