#!/usr/bin/env python3
"""
L4 OPP Renderer - devicetree opp-table node fragments
Output is meant to be pasted into an operating-points-v2 table as-is.
"""

from typing import Iterable, List, Optional

from l2_row_parse import Row

OPP_SUPPORTED_HW = 0x4007
PLL8_CLOCK_LATENCY_NS = 244144
SPEED_BIN = 0


def render_microvolts(row: Row, tiers: Iterable[int]) -> List[str]:
    """
    One opp-microvolt line per tier, min/typ/max all set to the same value.
    Example:
        opp-microvolt-speed0-pvs0 = <950000 950000 950000>;
    """
    lines = []
    for tier in tiers:
        uv = row.voltage(tier)
        lines.append(f"\topp-microvolt-speed{SPEED_BIN}-pvs{tier} = <{uv} {uv} {uv}>;")
    return lines


def render_opp(row: Row, tiers: Optional[Iterable[int]] = None) -> str:
    """Render one OPP node. `tiers` defaults to the tiers this row has voltages for."""
    if tiers is None:
        tiers = sorted(row.voltages)

    lines = [
        f"opp-{row.hz} {{",
        f"\topp-hz = /bits/ 64 <{row.hz}>;",
    ]
    lines += render_microvolts(row, tiers)
    lines += [
        f"\topp-supported-hw = <0x{OPP_SUPPORTED_HW:x}>;",
        f"\topp-level = <{row.perf_level}>;",
    ]
    if row.is_pll8:
        lines += [
            "\t/* give enough time to switch between PLL8 and HFPLL */",
            f"\tclock-latency-ns = <{PLL8_CLOCK_LATENCY_NS}>;",
        ]
    lines.append("};")
    return "\n".join(lines) + "\n"


def render_opp_table(rows: List[Row], tiers: Optional[List[int]] = None) -> str:
    """All nodes in row order, each followed by a blank line"""
    return "".join(render_opp(row, tiers) + "\n" for row in rows)
