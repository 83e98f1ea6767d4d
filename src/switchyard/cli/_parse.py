"""``switchyard parse``: print the tokens a pattern compiles to."""

import argparse

from switchyard.cli._resolve import compile_or_exit, settings_from_args
from switchyard.parsing.tokens import describe


def run_parse(args: argparse.Namespace) -> None:
    matcher = compile_or_exit(args.pattern, settings_from_args(args))
    if args.raw:
        for token in matcher.tokens:
            print(repr(token))
        return
    for token in matcher.program:
        print(describe(token))
