#!/usr/bin/env python3
"""
acpu2opp - convert downstream acpuclock tables to devicetree OPP nodes
Reads an acpuclock-*.c file, prints opp-table nodes on stdout.
Progress and errors go to stderr so stdout can be redirected into a .dtsi.
"""

import argparse
import sys
from pathlib import Path

from l1_block_extract import LAYOUTS, build_matchers
from l3_table_merge import build_opp_rows, write_rows_csv
from l4_opp_render import render_opp_table
from opp_errors import OppExtractError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='acpu2opp',
        description="Generate devicetree OPP nodes from a downstream acpuclock C file")
    parser.add_argument('path', help="Path to the acpuclock C source (e.g. acpuclock-8064.c)")
    parser.add_argument('--layout', choices=['auto'] + sorted(LAYOUTS), default='auto',
                        help="Table layout; auto picks pvs-table when a pvs side table exists")
    parser.add_argument('--csv', metavar='PATH',
                        help="Also save the merged row table as CSV")
    parser.add_argument('-v', '--verbose', action='store_true', help="Print debug details")
    parser.add_argument('-q', '--quiet', action='store_true', help="Only print warnings and errors")
    return parser.parse_args(argv)


def info(args, message):
    if not args.quiet:
        print(f"[INFO] {message}", file=sys.stderr)


def debug(args, message):
    if args.verbose:
        print(f"[DEBUG] {message}", file=sys.stderr)


def run(args) -> str:
    """Everything except writing the result; raises on any failure."""
    content = Path(args.path).read_text(encoding='utf-8')
    matchers = build_matchers()
    layout = None if args.layout == 'auto' else LAYOUTS[args.layout]

    table = build_opp_rows(content, matchers, layout)

    info(args, f"Layout: {table.layout.name}")
    info(args, f"Read {table.tables_seen} acpu_level tables, built {len(table.rows)} OPPs")
    info(args, f"Voltage tiers: {', '.join(f'pvs{tier}' for tier in table.tiers) or 'none'}")
    if table.skipped_rows:
        debug(args, f"Skipped {table.skipped_rows} rows not used for scaling")
    for tier, frequency in table.dropped:
        debug(args, f"pvs{tier}: no first-tier row for {frequency} kHz, dropped")

    if args.csv:
        write_rows_csv(table, args.csv)
        info(args, f"Row table saved to: {args.csv}")

    return render_opp_table(table.rows, table.tiers)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    try:
        output = run(args)
    except OppExtractError as e:
        print(f"[ERROR] {e.describe()}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] {args.path}: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
