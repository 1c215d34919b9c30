#!/usr/bin/env python3
"""
L3 Table Merge - one OPP row set from all PVS tables
The first table that yields rows defines the frequencies, perf levels and
PLL8 flags. Every later table only fills in its own voltage column.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from l1_block_extract import (
    OppMatchers,
    TierLayout,
    detect_layout,
    find_table_blocks,
    resolve_tier,
    split_rows,
)
from l2_row_parse import Row, parse_frequency_voltage, parse_row
from opp_errors import SanityLimitExceeded, StructuralMismatch


@dataclass
class OppTable:
    """Merged rows plus what the run saw along the way."""
    rows: List[Row]
    tiers: List[int]
    layout: TierLayout
    tables_seen: int = 0
    skipped_rows: int = 0
    dropped: list = field(default_factory=list)  # (tier slot, frequency)


def merge_tier(rows: List[Row], tier: int, body: str, matchers: OppMatchers,
               dropped: Optional[list] = None) -> int:
    """
    Copy one later table's voltages onto the existing rows.
    Rows are matched on frequency only; a frequency the first table did not
    define is dropped. Returns the number of rows updated.
    """
    by_freq = {row.frequency: row for row in rows}
    updated = 0
    for row_text in split_rows(body, matchers):
        frequency, voltage = parse_frequency_voltage(row_text, matchers)
        row = by_freq.get(frequency)
        if row is None:
            if dropped is not None:
                dropped.append((tier, frequency))
            continue
        row.voltages[tier] = voltage
        updated += 1
    return updated


def build_first_tier(tier, body: str, matchers: OppMatchers, layout: TierLayout):
    """Parse a first-tier table. Returns (rows, number of rows not used for scaling)."""
    rows = []
    skipped = 0
    for row_text in split_rows(body, matchers):
        row = parse_row(tier, rows, row_text, matchers, layout)
        if row is None:
            skipped += 1
            continue
        if any(existing.frequency == row.frequency for existing in rows):
            raise StructuralMismatch(f"frequency {row.frequency} is listed twice", row_text)
        rows.append(row)
    return rows, skipped


def build_opp_rows(content: str, matchers: OppMatchers,
                   layout: Optional[TierLayout] = None) -> OppTable:
    """
    Run the whole extraction on one source file's text.
    Nothing is returned unless every table parsed and the row count is sane.
    """
    if layout is None:
        layout = detect_layout(content, matchers)

    blocks = find_table_blocks(content, matchers, layout)
    table = OppTable(rows=[], tiers=[], layout=layout)

    for block in blocks:
        slot = resolve_tier(block.tier, layout)
        table.tables_seen += 1

        # the first table with usable rows defines the frequencies
        if not table.rows:
            table.rows, skipped = build_first_tier(block.tier, block.body, matchers, layout)
            table.skipped_rows += skipped
            if not table.rows:
                continue
        else:
            merge_tier(table.rows, slot, block.body, matchers, table.dropped)

        if slot not in table.tiers:
            table.tiers.append(slot)

    if len(table.rows) > layout.row_limit:
        raise SanityLimitExceeded(len(table.rows), layout.row_limit)

    table.tiers.sort()
    return table


def rows_to_dataframe(table: OppTable) -> pd.DataFrame:
    """One line per OPP, one pvs<N> column per tier seen"""
    records = []
    for row in table.rows:
        record = {
            'frequency_khz': row.frequency,
            'opp_hz': row.hz,
            'perf_level': row.perf_level,
            'l2_level': row.l2_level,
            'is_pll8': row.is_pll8,
        }
        for tier in table.tiers:
            record[f'pvs{tier}'] = row.voltage(tier)
        records.append(record)

    columns = ['frequency_khz', 'opp_hz', 'perf_level', 'l2_level', 'is_pll8']
    columns += [f'pvs{tier}' for tier in table.tiers]
    return pd.DataFrame(records, columns=columns)


def write_rows_csv(table: OppTable, output_csv) -> pd.DataFrame:
    """Save the merged row table for inspection"""
    df = rows_to_dataframe(table)
    df.to_csv(output_csv, index=False)
    return df
