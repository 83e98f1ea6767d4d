"""Switch import resolution: resolves ``"module:attribute"`` strings to Switch classes.

Shared utility used by ``switchyard routes``, ``resolve`` and ``check``.
"""

import argparse
import importlib
import sys

from switchyard.config import MatcherSettings, Modifier
from switchyard.matching.matcher import CompiledMatcher, compile
from switchyard.parsing.errors import ParseError
from switchyard.switch.resolver import Switch
from switchyard.terminal import format_parse_error


def resolve_switch(import_string: str) -> type[Switch]:
    """Resolve an import string to a ``Switch`` subclass.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"Route"``.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Switch`` subclass.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "Route"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if not (isinstance(obj, type) and issubclass(obj, Switch)):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a switchyard.Switch subclass"
        raise TypeError(msg)
    return obj


def load_switch(import_string: str) -> type[Switch]:
    """``resolve_switch`` for commands: import problems exit with status 1."""
    try:
        return resolve_switch(import_string)
    except ParseError as exc:
        print(format_parse_error(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def settings_from_args(args: argparse.Namespace) -> MatcherSettings:
    modifiers = Modifier.NONE
    if args.strict:
        modifiers |= Modifier.STRICT
    if args.case_insensitive:
        modifiers |= Modifier.CASE_INSENSITIVE
    if args.incomplete:
        modifiers |= Modifier.INCOMPLETE
    return MatcherSettings.from_modifiers(modifiers)


def compile_or_exit(pattern: str, settings: MatcherSettings) -> CompiledMatcher:
    """Compile *pattern*, printing the rendered error and exiting 1 when it is malformed."""
    try:
        return compile(pattern, settings)
    except ParseError as exc:
        print(format_parse_error(exc), file=sys.stderr)
        raise SystemExit(1) from exc
