"""Switchyard: a route-matching DSL with typed route switches.

Patterns compile into small programs that match URL-like strings and
extract captures.  Switches map a route string onto the first of an
ordered set of declared route classes.

Basic usage::

    from switchyard import compile

    matcher = compile("/users/{id}(/{tab})")
    matcher.match("/users/42/posts")   # Captures({'id': '42', 'tab': 'posts'})

Typed routes::

    from dataclasses import dataclass
    from switchyard import Switch, to

    class AppRoute(Switch):
        @to("/users/{id}")
        @dataclass(frozen=True)
        class User:
            id: int

        @to("/")
        class Home:
            pass

    AppRoute.switch("/users/42")   # AppRoute.User(id=42)
"""

__version__ = "0.1.0"
__all__ = [
    "BuildError",
    "Captures",
    "CompiledMatcher",
    "ConfigurationError",
    "MatcherSettings",
    "Modifier",
    "ParseError",
    "ParserErrorReason",
    "Route",
    "Switch",
    "SwitchyardError",
    "build_route",
    "check_switch",
    "compile",
    "resolve",
    "state_field",
    "to",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name in ("compile", "CompiledMatcher"):
        from switchyard.matching import matcher as _matcher

        return getattr(_matcher, name)

    if name == "Captures":
        from switchyard.matching.captures import Captures

        return Captures

    if name in ("MatcherSettings", "Modifier"):
        from switchyard import config as _config

        return getattr(_config, name)

    if name in ("ParseError", "ParserErrorReason"):
        from switchyard.parsing import errors as _perrors

        return getattr(_perrors, name)

    if name == "Route":
        from switchyard.route import Route

        return Route

    if name in ("Switch", "to", "resolve", "build_route"):
        from switchyard.switch import resolver as _resolver

        return getattr(_resolver, name)

    if name == "state_field":
        from switchyard.switch.binding import state_field

        return state_field

    if name == "check_switch":
        from switchyard.contracts import check_switch

        return check_switch

    if name in ("SwitchyardError", "ConfigurationError", "BuildError"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
