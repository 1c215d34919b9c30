#!/usr/bin/env python3
"""Trimmed acpuclock sources used across the tests."""

# acpuclock-8064 style: generic tables plus a [speed][pvs] side table
PVS_SOURCE = """
static struct l2_level l2_freq_tbl[] __initdata = {
	[0]  = { {  384000, PLL_8, 0, 0x00 }, 1050000, 1050000, 1 },
	[5]  = { {  594000, HFPLL, 1, 0x16 }, 1050000, 1050000, 2 },
	{ }
};

static struct acpu_level tbl_slow[] __initdata = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   950000 },
	{ 0, {   432000, HFPLL, 2, 0x20 }, L2(5),   975000 },
	{ 1, {   486000, HFPLL, 2, 0x24 }, L2(5),   975000 },
	{ 1, {   540000, HFPLL, 2, 0x28 }, L2(5),  1000000 },
	{ 1, {   594000, HFPLL, 1, 0x16 }, L2(5),  1000000 },
	{ 1, {   648000, HFPLL, 1, 0x18 }, L2(9),  1025000 },
	{ 0, { 0 } }
};

static struct acpu_level tbl_nom[] __initdata = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   900000 },
	{ 0, {   432000, HFPLL, 2, 0x20 }, L2(5),   925000 },
	{ 1, {   486000, HFPLL, 2, 0x24 }, L2(5),   925000 },
	{ 1, {   540000, HFPLL, 2, 0x28 }, L2(5),   950000 },
	{ 1, {   594000, HFPLL, 1, 0x16 }, L2(5),   950000 },
	{ 1, {   648000, HFPLL, 1, 0x18 }, L2(9),   975000 },
	{ 0, { 0 } }
};

static struct acpu_level tbl_fast[] __initdata = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   850000 },
	{ 1, {   486000, HFPLL, 2, 0x24 }, L2(5),   875000 },
	{ 1, {   540000, HFPLL, 2, 0x28 }, L2(5),   900000 },
	{ 1, {   594000, HFPLL, 1, 0x16 }, L2(5),   900000 },
	{ 1, {   648000, HFPLL, 1, 0x18 }, L2(9),   925000 },
	{ 1, {   702000, HFPLL, 1, 0x1A }, L2(9),   950000 },
	{ 0, { 0 } }
};

static struct pvs_table pvs_tables[NUM_SPEED_BINS][NUM_PVS] __initdata = {
	[0][PVS_SLOW]    = { tbl_slow, sizeof(tbl_slow),     0 },
	[0][PVS_NOMINAL] = { tbl_nom,  sizeof(tbl_nom),  25000 },
	[0][PVS_FAST]    = { tbl_fast, sizeof(tbl_fast), 25000 },
};
"""

# acpuclock-8960 style: tier name is part of the array name
NAMED_SOURCE = """
static struct acpu_level acpu_freq_tbl_slow[] = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   950000 },
	{ 1, {   702000, HFPLL, 1, 0x1A }, L2(1),  1025000 },
	{ 1, {   918000, HFPLL, 1, 0x22 }, L2(1),  1075000 },
	{ 0, { 0 } }
};

static struct acpu_level acpu_freq_tbl_nom[] = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   925000 },
	{ 1, {   702000, HFPLL, 1, 0x1A }, L2(1),  1000000 },
	{ 1, {   918000, HFPLL, 1, 0x22 }, L2(1),  1050000 },
	{ 0, { 0 } }
};

static struct acpu_level acpu_freq_tbl_fast[] = {
	{ 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   900000 },
	{ 1, {   702000, HFPLL, 1, 0x1A }, L2(1),   975000 },
	{ 1, {   918000, HFPLL, 1, 0x22 }, L2(1),  1025000 },
	{ 0, { 0 } }
};
"""

SCENARIO_A = """
static struct acpu_level tbl_a[] __initdata = {
	{ 1, {   200000, PLL_8, 0, 0x00 }, L2(1),   900000 },
	{ 0, { 0 } }
};

static struct pvs_table pvs_tables[NUM_SPEED_BINS][NUM_PVS] __initdata = {
	[0][0] = { tbl_a, sizeof(tbl_a), 0 },
};
"""

SCENARIO_B = """
static struct acpu_level tbl_a[] __initdata = {
	{ 1, {   200000, PLL_8, 0, 0x00 }, L2(1),   900000 },
	{ 0, { 0 } }
};

static struct acpu_level tbl_b[] __initdata = {
	{ 1, {   200000, PLL_8, 0, 0x00 }, L2(1),   950000 },
	{ 1, {   300000, HFPLL, 1, 0x10 }, L2(2),   975000 },
	{ 0, { 0 } }
};

static struct pvs_table pvs_tables[NUM_SPEED_BINS][NUM_PVS] __initdata = {
	[0][0] = { tbl_a, sizeof(tbl_a), 0 },
	[0][1] = { tbl_b, sizeof(tbl_b), 0 },
};
"""

SCENARIO_A_OUTPUT = (
    "opp-200000000 {\n"
    "\topp-hz = /bits/ 64 <200000000>;\n"
    "\topp-microvolt-speed0-pvs0 = <900000 900000 900000>;\n"
    "\topp-supported-hw = <0x4007>;\n"
    "\topp-level = <1>;\n"
    "\t/* give enough time to switch between PLL8 and HFPLL */\n"
    "\tclock-latency-ns = <244144>;\n"
    "};\n"
)


def named_source_with_rows(count):
    """A single slow table with `count` distinct rows, one L2 level each"""
    rows = []
    for i in range(count):
        rows.append(f"\t{{ 1, {{ {384000 + i * 54000}, HFPLL, 1, 0x{i:02X} }}, L2({i}), {950000 + i * 12500} }},")
    return ("static struct acpu_level acpu_freq_tbl_slow[] = {\n"
            + "\n".join(rows)
            + "\n\t{ 0, { 0 } }\n};\n")
