#!/usr/bin/env python3
"""
L1 Block Extraction - acpu_level table discovery
Finds `static struct acpu_level` arrays in a downstream acpuclock source file
and works out which voltage tier (PVS bin) each array belongs to.

Two table layouts are supported:
    named      - tier name embedded in the array identifier
                 (acpu_freq_tbl_slow[], acpu_freq_tbl_nom[], acpu_freq_tbl_fast[])
    pvs-table  - generic arrays paired, in order, with the entries of a
                 `[speed][pvs] = { table, ... }` side table
"""

import re
import sys
from collections import namedtuple
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from opp_errors import StructuralMismatch, UnknownTier

VOLTAGE_SLOTS = 7

TableBlock = namedtuple('TableBlock', ['name', 'tier', 'body'])


@dataclass(frozen=True)
class TierLayout:
    """Maps tier designators to voltage slots for one table layout."""
    name: str
    tiers: Dict[str, int]
    row_limit: int
    numeric_tiers: bool = False
    slot_count: int = VOLTAGE_SLOTS


THREE_TIER = TierLayout(
    name='named',
    tiers={'slow': 0, 'nom': 1, 'fast': 2},
    row_limit=12,
)

PVS_TABLE = TierLayout(
    name='pvs-table',
    tiers={'PVS_SLOW': 0, 'PVS_NOMINAL': 2, 'PVS_FAST': 3, 'PVS_FASTER': 4},
    row_limit=20,
    numeric_tiers=True,
)

LAYOUTS = {layout.name: layout for layout in (THREE_TIER, PVS_TABLE)}


@dataclass(frozen=True)
class OppMatchers:
    """Compiled patterns shared by every stage of one run."""
    block: re.Pattern
    pvs_entry: re.Pattern
    row: re.Pattern
    token: re.Pattern
    descriptor: re.Pattern
    number: re.Pattern


def build_matchers() -> OppMatchers:
    """Compile all patterns once; the result is passed to every stage."""
    return OppMatchers(
        # static struct acpu_level tbl_slow[] __initdata = { ... };
        block=re.compile(
            r'static\s+struct\s+acpu_level\s+(\w+)\s*\[[^\]]*\][^=;{]*=\s*\{(.*?)\};',
            re.DOTALL),
        # [0][PVS_SLOW] = { tbl_slow, sizeof(tbl_slow), 0 },
        pvs_entry=re.compile(r'\[\s*(\w+)\s*\]\s*\[\s*(\w+)\s*\]\s*=\s*\{\s*([A-Za-z_]\w*)'),
        # { 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   950000 },
        # voltage is optional here so a truncated row fails in the parser
        row=re.compile(r'\b\w+\s*,\s*\{[^{}]*\}\s*,\s*\w+\s*\([^)]*\)(?:\s*,\s*\w+)?'),
        # Order matters: hex, decimal, call-like, bare identifier
        token=re.compile(
            r'(?P<hex>\b0[xX][0-9A-Fa-f]+\b)'
            r'|(?P<dec>\b\d+\b)'
            r'|(?P<call>\b\w+\b\([^)]*\))'
            r'|(?P<ident>\b\w+\b)'),
        descriptor=re.compile(r'^L2\(\s*(\d+)\s*\)$'),
        number=re.compile(r'^(?:0[xX][0-9A-Fa-f]+|\d+)$'),
    )


def resolve_tier(designator, layout: TierLayout) -> int:
    """
    Turn a tier designator into a voltage slot index.
    Examples (pvs-table layout):
        "PVS_NOMINAL" -> 2
        "5" -> 5
        6 -> 6
    """
    if isinstance(designator, int) and not isinstance(designator, bool):
        slot = designator
        if layout.numeric_tiers:
            valid = 0 <= slot < layout.slot_count
        else:
            valid = slot in layout.tiers.values()
        if not valid:
            raise UnknownTier(designator, layout.name)
        return slot

    text = str(designator).strip()
    if text in layout.tiers:
        return layout.tiers[text]
    if layout.numeric_tiers and text.isdigit():
        return resolve_tier(int(text), layout)
    raise UnknownTier(designator, layout.name)


def extract_blocks(content: str, matchers: OppMatchers) -> List[TableBlock]:
    """Return every acpu_level array in source order, tier not yet known."""
    blocks = []
    for match in matchers.block.finditer(content):
        name, body = match.group(1), match.group(2)
        if body is None or not body.strip():
            raise StructuralMismatch(f"acpu_level table '{name}' has no contents", match.group(0))
        blocks.append(TableBlock(name, None, body))
    return blocks


def tier_from_name(name: str, layout: TierLayout) -> Optional[str]:
    """
    Get the tier name embedded at the end of an array identifier.
    Input: "acpu_freq_tbl_8960_kraitv2_nom"
    Output: "nom"
    """
    suffix = name.rsplit('_', 1)[-1]
    if suffix in layout.tiers:
        return suffix
    return None


def extract_named_blocks(content: str, matchers: OppMatchers,
                         layout: TierLayout = THREE_TIER) -> List[TableBlock]:
    """Blocks whose identifier names their tier; other acpu_level arrays are ignored."""
    named = []
    for block in extract_blocks(content, matchers):
        tier = tier_from_name(block.name, layout)
        if tier is not None:
            named.append(block._replace(tier=tier))
    return named


def discover_pvs_tiers(content: str, matchers: OppMatchers) -> List[Tuple[str, str]]:
    """
    Collect (pvs designator, table name) pairs from the pvs_tables side table.
    Only entries with a numeric speed bin index are used.
    Input: "[0][PVS_SLOW]    = { tbl_slow, sizeof(tbl_slow), 0 },"
    Output: [("PVS_SLOW", "tbl_slow")]
    """
    entries = []
    for match in matchers.pvs_entry.finditer(content):
        speed, pvs, table = match.groups()
        # TODO: accept symbolic speed bins once a kernel shows up that uses them
        if not speed.isdigit():
            continue
        entries.append((pvs, table))
    return entries


def pair_blocks(blocks: List[TableBlock], tiers: List[Tuple[str, str]]) -> List[TableBlock]:
    """Pair blocks with side-table entries by position; extra items on either side are dropped."""
    paired = []
    for block, (pvs, table) in zip(blocks, tiers):
        if table != block.name:
            print(f"[WARNING] Side table entry {pvs} names '{table}' "
                  f"but is paired with '{block.name}'", file=sys.stderr)
        paired.append(block._replace(tier=pvs))
    return paired


def detect_layout(content: str, matchers: OppMatchers) -> TierLayout:
    """Pick the layout a source file uses."""
    if discover_pvs_tiers(content, matchers):
        return PVS_TABLE
    if extract_named_blocks(content, matchers, THREE_TIER):
        return THREE_TIER
    raise StructuralMismatch("no acpu_level table found")


def find_table_blocks(content: str, matchers: OppMatchers,
                      layout: TierLayout) -> List[TableBlock]:
    """Return tier-resolved table blocks for the given layout."""
    if layout.numeric_tiers:
        blocks = pair_blocks(extract_blocks(content, matchers),
                             discover_pvs_tiers(content, matchers))
    else:
        blocks = extract_named_blocks(content, matchers, layout)

    if not blocks:
        raise StructuralMismatch(f"no acpu_level table found for the {layout.name} layout")
    return blocks


def split_rows(body: str, matchers: OppMatchers) -> List[str]:
    """Isolate each row initializer of a table body; terminator rows never match."""
    return [match.group(0) for match in matchers.row.finditer(body)]
