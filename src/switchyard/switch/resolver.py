"""Typed route switches.

A ``Switch`` subclass declares its routes as nested classes decorated
with ``@to(pattern)``.  Resolution tries them in declaration order and
returns an instance of the first one that both matches and binds::

    class AppRoute(Switch):
        @to("/users/{id}")
        @dataclass(frozen=True)
        class User:
            id: int

        @to("/")
        class Home:
            pass

    AppRoute.switch("/users/42")   # AppRoute.User(id=42)
    AppRoute.build_route(AppRoute.User(id=7))   # "/users/7"

Declaration order matters: put specific routes before catch-alls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, get_origin

from switchyard.config import MatcherSettings, Modifier, coerce_settings
from switchyard.errors import BuildError, ConfigurationError
from switchyard.matching.matcher import CompiledMatcher, compile
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
from switchyard.route import Route
from switchyard.switch.binding import (
    FieldSpec,
    Layout,
    StateSlot,
    Unbindable,
    field_layout,
    populate,
)
from switchyard.switch.converters import to_text

logger = logging.getLogger("switchyard.switch")

_VARIANT_ATTR = "__switchyard_variant__"


@dataclass(frozen=True, slots=True)
class Variant:
    """A route class together with its compiled pattern and field layout."""

    cls: type
    matcher: CompiledMatcher
    layout: Layout
    fields: tuple[FieldSpec, ...]
    explicit_settings: bool = False

    @property
    def pattern(self) -> str:
        return self.matcher.pattern

    def with_settings(self, settings: MatcherSettings) -> Variant:
        matcher = compile(self.pattern, settings)
        return Variant(self.cls, matcher, self.layout, self.fields, self.explicit_settings)

    def resolve(self, text: str, state: StateSlot) -> Any | None:
        """Match and bind *text*, or return None."""
        captures = self.matcher.match(text)
        if captures is None:
            return None
        mark = state.mark()
        try:
            return populate(self.cls, self.layout, self.fields, captures, state, nested_resolver)
        except Unbindable as exc:
            state.reset(mark)
            logger.debug(
                "%s matched %r but field %r could not bind",
                self.cls.__qualname__,
                text,
                exc.args[0] if exc.args else None,
            )
            return None


# ---------------------------------------------------------------------------
# Declaration
# ---------------------------------------------------------------------------


def to[T](
    pattern: str,
    *,
    settings: MatcherSettings | Modifier | None = None,
) -> Callable[[type[T]], type[T]]:
    """Attach a matcher string to a route class.

    The pattern is compiled immediately, so a syntax error surfaces as a
    ``ParseError`` at import time.  Fields a match can never supply raise
    ``ConfigurationError``.
    """

    def decorator(cls: type[T]) -> type[T]:
        matcher = compile(pattern, settings)
        layout, fields = field_layout(cls)
        _verify(cls, matcher, layout, fields)
        variant = Variant(cls, matcher, layout, fields, explicit_settings=settings is not None)
        setattr(cls, _VARIANT_ATTR, variant)
        return cls

    return decorator


def _verify(
    cls: type,
    matcher: CompiledMatcher,
    layout: Layout,
    fields: tuple[FieldSpec, ...],
) -> None:
    name = cls.__qualname__
    state_fields = [spec.name for spec in fields if spec.is_state]
    if len(state_fields) > 1:
        msg = f"{name} declares more than one state field: {', '.join(state_fields)}"
        raise ConfigurationError(msg)

    match layout:
        case Layout.NAMED:
            available = matcher.capture_names()
            for spec in fields:
                if spec.required and spec.name not in available:
                    msg = (
                        f"{name}.{spec.name} has no capture named {spec.name!r} "
                        f"in {matcher.pattern!r}"
                    )
                    raise ConfigurationError(msg)
        case Layout.POSITIONAL:
            required = sum(1 for spec in fields if spec.required)
            if required > matcher.capture_count():
                msg = (
                    f"{name} needs {required} captures but {matcher.pattern!r} "
                    f"always provides {matcher.capture_count()}"
                )
                raise ConfigurationError(msg)


def _is_class(obj: Any) -> bool:
    return get_origin(obj) is None and isinstance(obj, type)


def variant_of(cls: Any) -> Variant | None:
    """The ``@to`` declaration of *cls*, if it has its own."""
    if _is_class(cls):
        return vars(cls).get(_VARIANT_ATTR)
    return None


def nested_resolver(annotation: Any) -> Callable[[str, StateSlot], Any] | None:
    """Resolver for field types that are routes themselves."""
    if _is_class(annotation) and issubclass(annotation, Switch):
        return annotation._resolve
    variant = variant_of(annotation)
    if variant is not None:
        return variant.resolve
    return None


# ---------------------------------------------------------------------------
# Switch
# ---------------------------------------------------------------------------


class Switch:
    """Base class for a set of routes.

    Subclasses may set default matcher settings for their variants::

        class Docs(Switch, settings=Modifier.CASE_INSENSITIVE):
            ...

    A variant's own ``@to(..., settings=...)`` wins over the class default.
    """

    __switchyard_variants__: ClassVar[tuple[Variant, ...]] = ()

    def __init_subclass__(
        cls,
        *,
        settings: MatcherSettings | Modifier | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        default = coerce_settings(settings) if settings is not None else None
        variants = list(cls.__switchyard_variants__)
        for value in vars(cls).values():
            variant = variant_of(value)
            if variant is None:
                continue
            if default is not None and not variant.explicit_settings:
                variant = variant.with_settings(default)
                setattr(variant.cls, _VARIANT_ATTR, variant)
            variants.append(variant)
        cls.__switchyard_variants__ = tuple(variants)

    @classmethod
    def variants(cls) -> tuple[tuple[type, CompiledMatcher], ...]:
        """``(variant class, matcher)`` pairs in resolution order."""
        return tuple((v.cls, v.matcher) for v in cls.__switchyard_variants__)

    @classmethod
    def switch(cls, route: Route | str) -> Any | None:
        """Resolve *route* to the first variant that matches and binds."""
        if isinstance(route, str):
            route = Route(route)
        result = cls._resolve(route.route, StateSlot(route.state))
        if result is None:
            logger.debug("No route of %s matched %r", cls.__qualname__, route.route)
        return result

    @classmethod
    def _resolve(cls, text: str, state: StateSlot) -> Any | None:
        for variant in cls.__switchyard_variants__:
            result = variant.resolve(text, state)
            if result is not None:
                logger.debug("Resolved %r to %s", text, variant.cls.__qualname__)
                return result
        return None

    @classmethod
    def build_route(cls, value: Any) -> str:
        """Write *value*, an instance of one of the variants, back into a route string."""
        for variant in cls.__switchyard_variants__:
            if type(value) is variant.cls:
                return build_route(value, variant)
        msg = f"{type(value).__qualname__} is not a route of {cls.__qualname__}"
        raise BuildError(msg)


def resolve(target: type, route: Route | str) -> Any | None:
    """Resolve *route* against a ``Switch`` subclass or a single ``@to`` class."""
    if isinstance(target, type) and issubclass(target, Switch):
        return target.switch(route)
    variant = variant_of(target)
    if variant is None:
        msg = f"{target!r} is neither a Switch nor decorated with @to"
        raise TypeError(msg)
    if isinstance(route, str):
        route = Route(route)
    return variant.resolve(route.route, StateSlot(route.state))


# ---------------------------------------------------------------------------
# Route building
# ---------------------------------------------------------------------------


def build_route(value: Any, variant: Variant | None = None) -> str:
    """Write a route value back into a route string."""
    if variant is None:
        variant = variant_of(type(value))
        if variant is None:
            msg = f"{type(value).__qualname__} is not a route class"
            raise BuildError(msg)
    writer = _RouteWriter(value, variant)
    try:
        return writer.write(variant.matcher.tokens)
    except _Absent:
        msg = f"{value!r} is missing a value required by {variant.pattern!r}"
        raise BuildError(msg) from None


class _RouteWriter:
    """Fills a variant's tokens with the field values of one instance."""

    __slots__ = ("position", "value", "variant")

    def __init__(self, value: Any, variant: Variant) -> None:
        self.value = value
        self.variant = variant
        self.position = 0

    def write(self, tokens: tuple[Token, ...]) -> str:
        return "".join(self._token(token) for token in tokens)

    def _token(self, token: Token) -> str:
        match token:
            case Separator():
                return "/"
            case Literal(text):
                return text
            case QueryBegin():
                return "?"
            case QuerySeparator():
                return "&"
            case FragmentBegin():
                return "#"
            case End():
                return ""
            case QueryCapture(key, Capture() as capture):
                return f"{key}={self._capture(capture)}"
            case QueryCapture(key, value):
                return f"{key}={value}"
            case Capture():
                return self._capture(token)
            case OptionalGroup(inner):
                return self._optional(inner)
        msg = f"Unknown token: {token!r}"
        raise BuildError(msg)

    def _optional(self, inner: tuple[Token, ...]) -> str:
        if not _contains_capture(inner):
            return ""
        saved = self.position
        try:
            return self.write(inner)
        except _Absent:
            self.position = saved
            return ""

    def _capture(self, capture: Capture) -> str:
        field_value = self._field_value(capture)
        if field_value is None:
            raise _Absent
        nested = variant_of(type(field_value))
        if nested is not None:
            return build_route(field_value, nested)
        text = to_text(field_value)
        if capture.allowed is not None and text not in capture.allowed:
            msg = f"{text!r} is not one of {list(capture.allowed)!r} in {self.variant.pattern!r}"
            raise BuildError(msg)
        return text

    def _field_value(self, capture: Capture) -> Any:
        match self.variant.layout:
            case Layout.POSITIONAL:
                values = tuple(self.value)
                if self.position >= len(values):
                    raise _Absent
                self.position += 1
                return values[self.position - 1]
            case Layout.NAMED if capture.name is not None:
                return getattr(self.value, capture.name, None)
        msg = f"Cannot write unnamed capture {capture.source()} of {self.variant.pattern!r}"
        raise BuildError(msg)


class _Absent(Exception):
    """A capture has no value; the enclosing optional group is dropped."""


def _contains_capture(tokens: tuple[Token, ...]) -> bool:
    for token in tokens:
        match token:
            case Capture() | QueryCapture(_, Capture()):
                return True
            case OptionalGroup(inner) if _contains_capture(inner):
                return True
    return False
