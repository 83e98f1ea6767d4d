"""Capture to field-type conversion.

Built-in converters for the annotated types of route fields, e.g.
``id: int`` for ``/users/{id}``.
"""

import functools
import types
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any, Union, get_args, get_origin

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def to_bool(value: str) -> bool:
    """Strict boolean conversion; anything unrecognized raises ``ValueError``."""
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"Not a boolean: {value!r}"
    raise ValueError(msg)


CONVERTERS: dict[Any, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: to_bool,
    uuid.UUID: uuid.UUID,
    Any: str,
}


def unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``T | None`` into ``(T, True)``; anything else is ``(annotation, False)``."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = get_args(annotation)
        present = [arg for arg in args if arg is not type(None)]
        if len(present) == 1 and len(args) == 2:
            return present[0], True
    return annotation, False


def converter_for(annotation: Any) -> Callable[[str], Any] | None:
    """The converter for a non-optional *annotation*, or None if there is none."""
    converter = CONVERTERS.get(annotation)
    if converter is not None:
        return converter
    if get_origin(annotation) is None and isinstance(annotation, type) and issubclass(annotation, Enum):
        return functools.partial(to_member, annotation)
    return None


def to_member[E: Enum](enum_cls: type[E], value: str) -> E:
    """The member of *enum_cls* whose value is written as *value*."""
    for member in enum_cls:
        if str(member.value) == value:
            return member
    msg = f"{value!r} is not a value of {enum_cls.__qualname__}"
    raise ValueError(msg)


def to_text(value: Any) -> str:
    """Write a field value back into a route."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
