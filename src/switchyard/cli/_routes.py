"""``switchyard routes``: list the routes of a Switch.

Prints a table of resolution order, variant, layout and pattern.
"""

import argparse

from switchyard.cli._resolve import load_switch


def run_routes(args: argparse.Namespace) -> None:
    switch_cls = load_switch(args.switch)
    variants = switch_cls.__switchyard_variants__
    if not variants:
        print("No routes declared.")
        return

    rows = [
        (str(index), variant.cls.__qualname__, variant.layout.value, variant.pattern)
        for index, variant in enumerate(variants, start=1)
    ]
    max_name = max(max(len(r[1]) for r in rows), 5)  # "ROUTE" header
    max_layout = max(max(len(r[2]) for r in rows), 6)  # "LAYOUT" header

    fmt = f"{{:>2}}  {{:<{max_name}}}  {{:<{max_layout}}}  {{}}"
    print(fmt.format("#", "ROUTE", "LAYOUT", "PATTERN"))
    sep_len = max_name + max_layout + 8 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
