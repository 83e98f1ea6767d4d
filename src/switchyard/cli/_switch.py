"""``switchyard resolve``: resolve a route string with a Switch.

Prints the selected variant.  Exits with code 1 when no route binds.
"""

import argparse
import sys

from switchyard.cli._resolve import load_switch


def run_resolve(args: argparse.Namespace) -> None:
    switch_cls = load_switch(args.switch)
    value = switch_cls.switch(args.route)
    if value is None:
        print(f"Not found: no route of {switch_cls.__qualname__} matches {args.route!r}", file=sys.stderr)
        raise SystemExit(1)
    print(repr(value))
