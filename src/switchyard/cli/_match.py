"""``switchyard match``: run one pattern against one input.

Prints each capture on its own line.  Exits with code 1 when the input
does not match.
"""

import argparse
import sys

from switchyard.cli._resolve import compile_or_exit, settings_from_args


def run_match(args: argparse.Namespace) -> None:
    matcher = compile_or_exit(args.pattern, settings_from_args(args))
    if matcher.settings.complete:
        captures = matcher.match(args.input)
        rest = ""
    else:
        result = matcher.match_prefix(args.input)
        captures, rest = result if result is not None else (None, "")

    if captures is None:
        print(f"No match: {args.input!r} against {args.pattern!r}", file=sys.stderr)
        raise SystemExit(1)

    print("Matched.")
    for name, value in captures.entries:
        print(f"  {name or '_'} = {value!r}")
    if rest:
        print(f"  (unconsumed: {rest!r})")
