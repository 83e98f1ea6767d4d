"""``switchyard check``: route table validation command.

Resolves an import string to a Switch and runs the contract checks,
printing results to stdout.  Exits with code 1 if errors are found.
"""

import argparse

from switchyard.cli._resolve import load_switch
from switchyard.contracts import check_switch
from switchyard.terminal import format_check_result


def run_check(args: argparse.Namespace) -> None:
    switch_cls = load_switch(args.switch)
    result = check_switch(switch_cls)
    print(format_check_result(result))
    if not result.ok:
        raise SystemExit(1)
