"""Switchyard CLI: inspect patterns and route tables.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import logging
import sys


def _add_settings_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Don't add an optional trailing '/' after path literals",
    )
    parser.add_argument(
        "--case-insensitive",
        action="store_true",
        help="Compare literals without regard to case",
    )
    parser.add_argument(
        "--incomplete",
        action="store_true",
        help="Allow input to remain after the pattern has matched",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard: route patterns, captures and typed route switches.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser, matcher and switch decisions",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard parse -------------------------------------------------
    parse_parser = subparsers.add_parser("parse", help="Show the compiled program of a pattern")
    parse_parser.add_argument("pattern", help="Matcher string (e.g. '/users/{id}')")
    parse_parser.add_argument(
        "--raw",
        action="store_true",
        help="Show parser tokens instead of the optimized program",
    )
    _add_settings_flags(parse_parser)

    # -- switchyard match -------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Match a pattern against input")
    match_parser.add_argument("pattern", help="Matcher string")
    match_parser.add_argument("input", help="Route string to match")
    _add_settings_flags(match_parser)

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes of a Switch")
    routes_parser.add_argument("switch", help="Import string (e.g. myapp.routes:AppRoute)")

    # -- switchyard resolve -----------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a route with a Switch")
    resolve_parser.add_argument("switch", help="Import string (e.g. myapp.routes:AppRoute)")
    resolve_parser.add_argument("route", help="Route string to resolve")

    # -- switchyard check -------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate a Switch route table")
    check_parser.add_argument("switch", help="Import string (e.g. myapp.routes:AppRoute)")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "parse":
        from switchyard.cli._parse import run_parse

        run_parse(args)
    elif args.command == "match":
        from switchyard.cli._match import run_match

        run_match(args)
    elif args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from switchyard.cli._switch import run_resolve

        run_resolve(args)
    elif args.command == "check":
        from switchyard.cli._check import run_check

        run_check(args)
