"""Switchyard exception hierarchy.

Shared across the parser, the matcher and the switch resolver so every
module raises and catches the same types.  Pattern syntax errors live in
:mod:`switchyard.parsing.errors` and subclass :class:`SwitchyardError`.
"""


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route declaration is invalid.

    Typically raised while a ``Switch`` subclass body is being collected,
    e.g. a variant field that no capture of its pattern can ever fill.
    """


class BuildError(SwitchyardError):
    """Raised when a route string cannot be written back from a value."""
