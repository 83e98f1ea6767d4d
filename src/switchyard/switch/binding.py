"""Populating route variants from captures.

A variant class has one of three field layouts:

- **named**: a dataclass.  Each field is looked up by name among the
  named captures.
- **positional**: a ``NamedTuple``.  Fields are filled in order from
  every capture, named or not.
- **unit**: a class without fields.  It is instantiated bare.

Captured strings are converted to the annotated field type.  A missing
capture falls back to the field default, then to ``None`` for ``T | None``
fields; with neither, the variant does not bind.  Conversion failures
also make the variant not bind, except for ``T | None`` fields, which
become ``None``.  Fields whose type is itself a switch or a ``@to``
class are resolved recursively on the captured text.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from switchyard.matching.captures import Captures
from switchyard.switch.converters import converter_for, unwrap_optional

STATE_KEY = "switchyard.state"

# Given a field type, returns a resolver for nested route types or None.
type NestedLookup = Callable[[Any], Callable[[str, StateSlot], Any] | None]


class _Missing:
    """Marker for a field without a declared default."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()


class Layout(Enum):
    """How a variant's fields are filled from captures."""

    NAMED = "named"
    POSITIONAL = "positional"
    UNIT = "unit"


class Unbindable(Exception):
    """The captures cannot populate a variant; the next one is tried."""


def state_field(**kwargs: Any) -> Any:
    """Declare a dataclass field that receives the ``Route`` state payload.

    The payload is handed out once; any later state field in the same
    resolution receives ``None``.
    """
    metadata = {**kwargs.pop("metadata", {}), STATE_KEY: True}
    return dataclasses.field(default=None, metadata=metadata, **kwargs)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One field of a variant class, with its annotation resolved."""

    name: str
    annotation: Any
    optional: bool = False
    default: Any = _MISSING
    default_factory: Callable[[], Any] | Any = _MISSING
    is_state: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not _MISSING

    @property
    def required(self) -> bool:
        """True when a match must supply this field."""
        return not (self.has_default or self.optional or self.is_state)

    def fallback(self) -> Any:
        """Value for a missing capture.  Raises ``Unbindable`` without one."""
        if self.default is not _MISSING:
            return self.default
        if self.default_factory is not _MISSING:
            return self.default_factory()
        if self.optional:
            return None
        raise Unbindable(self.name)


class StateSlot:
    """The ``Route`` state payload, handed out at most once."""

    __slots__ = ("_taken", "_value")

    def __init__(self, value: Any = None) -> None:
        self._value = value
        self._taken = False

    def take(self) -> Any:
        if self._taken:
            return None
        self._taken = True
        return self._value

    def mark(self) -> bool:
        return self._taken

    def reset(self, mark: bool) -> None:
        self._taken = mark


def field_layout(cls: type) -> tuple[Layout, tuple[FieldSpec, ...]]:
    """Inspect *cls* and describe how it is populated."""
    if dataclasses.is_dataclass(cls):
        hints = typing.get_type_hints(cls)
        specs = []
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            annotation, optional = unwrap_optional(hints.get(f.name, Any))
            specs.append(
                FieldSpec(
                    name=f.name,
                    annotation=annotation,
                    optional=optional,
                    default=_declared(f.default),
                    default_factory=_declared(f.default_factory),
                    is_state=bool(f.metadata.get(STATE_KEY)),
                )
            )
        return (Layout.NAMED if specs else Layout.UNIT), tuple(specs)

    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        hints = typing.get_type_hints(cls)
        defaults = getattr(cls, "_field_defaults", {})
        specs = []
        for name in cls._fields:
            annotation, optional = unwrap_optional(hints.get(name, Any))
            specs.append(
                FieldSpec(
                    name=name,
                    annotation=annotation,
                    optional=optional,
                    default=defaults.get(name, _MISSING),
                )
            )
        return (Layout.POSITIONAL if specs else Layout.UNIT), tuple(specs)

    return Layout.UNIT, ()


def _declared(value: Any) -> Any:
    return _MISSING if value is dataclasses.MISSING else value


def populate(
    cls: type,
    layout: Layout,
    fields: tuple[FieldSpec, ...],
    captures: Captures,
    state: StateSlot,
    nested: NestedLookup,
) -> Any:
    """Build an instance of *cls* from *captures*.  Raises ``Unbindable``."""
    match layout:
        case Layout.UNIT:
            return cls()
        case Layout.NAMED:
            kwargs: dict[str, Any] = {}
            for spec in fields:
                if spec.is_state:
                    kwargs[spec.name] = state.take()
                elif spec.name in captures:
                    kwargs[spec.name] = convert(spec, captures[spec.name], state, nested)
                else:
                    kwargs[spec.name] = spec.fallback()
            return cls(**kwargs)
        case Layout.POSITIONAL:
            values = captures.positional
            args = []
            for index, spec in enumerate(fields):
                if index < len(values):
                    args.append(convert(spec, values[index], state, nested))
                else:
                    args.append(spec.fallback())
            return cls(*args)


def convert(spec: FieldSpec, raw: str, state: StateSlot, nested: NestedLookup) -> Any:
    """Convert one captured string for *spec*.  Raises ``Unbindable``."""
    resolver = nested(spec.annotation)
    if resolver is not None:
        value = resolver(raw, state)
        if value is None and not spec.optional:
            raise Unbindable(spec.name)
        return value

    converter = converter_for(spec.annotation)
    if converter is None:
        raise Unbindable(spec.name)
    try:
        return converter(raw)
    except (ValueError, TypeError):
        if spec.optional:
            return None
        raise Unbindable(spec.name) from None
