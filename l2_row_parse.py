#!/usr/bin/env python3
"""
L2 Row Parsing - acpu_level rows to normalized OPP rows
Tokenizes one row initializer by position and builds a Row from it.

Token order of an acpu_level row:
    { 1, {   384000, PLL_8, 0, 0x00 }, L2(0),   950000 }
      0      1       2      3  4       5        6
    use_for_scaling, khz, src, pri_src_sel, pll_l_val, l2_level, vdd_core
"""

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from l1_block_extract import PVS_TABLE, OppMatchers, TierLayout, resolve_tier
from opp_errors import MalformedDescriptor, MissingField, NumericParseError

PLL8_SOURCE = 'PLL_8'

ROW_FIELDS = (
    'use_for_scaling',
    'frequency',
    'clock_source',
    'source_selector',
    'source_value',
    'l2_level',
    'voltage',
)

Token = namedtuple('Token', ['kind', 'text', 'pos'])


@dataclass
class Row:
    frequency: int
    is_pll8: bool
    l2_level: int
    perf_level: int
    voltages: Dict[int, int] = field(default_factory=dict)

    @property
    def hz(self) -> int:
        return self.frequency * 1000

    def voltage(self, tier: int) -> int:
        """Voltage for a tier slot, 0 if that tier never listed this frequency"""
        return self.voltages.get(tier, 0)


class RowTokens:
    """
    Lazy token sequence over one row's text.
    Each iteration rescans from the start, so the same object can be
    walked several times (first-tier parse, later-tier merge).
    """

    def __init__(self, text: str, matchers: OppMatchers):
        self.text = text
        self.matchers = matchers

    def __iter__(self):
        for match in self.matchers.token.finditer(self.text):
            yield Token(match.lastgroup, match.group(0), match.start())

    def nth(self, index: int) -> Optional[Token]:
        for i, token in enumerate(self):
            if i == index:
                return token
        return None


def tokenize_row(text: str, matchers: OppMatchers) -> List[Token]:
    return list(RowTokens(text, matchers))


def take(tokens, index: int, row_text: str) -> Token:
    """Next token from an iterator, or MissingField naming what was expected"""
    token = next(tokens, None)
    if token is None:
        raise MissingField(ROW_FIELDS[index], index, row_text)
    return token


def take_inner(tokens, index: int, row_text: str) -> Token:
    """
    Take a field from inside the core speed braces.
    Reaching the L2(n) call here means the braces held too few fields.
    """
    token = take(tokens, index, row_text)
    if token.kind == 'call':
        raise MissingField(ROW_FIELDS[index], index, row_text)
    return token


def parse_number(token: Token, field_name: str, matchers: OppMatchers, row_text: str) -> int:
    """
    Parse a decimal or hex literal token.
    Examples:
        "384000" -> 384000
        "0x1A" -> 26
    """
    if not matchers.number.match(token.text):
        raise NumericParseError(field_name, token.text, row_text)
    return int(token.text, 0) if token.text.lower().startswith('0x') else int(token.text)


def parse_l2_level(token: Token, matchers: OppMatchers, row_text: str) -> int:
    """Get n out of an L2(n) descriptor token"""
    match = matchers.descriptor.match(token.text)
    if not match:
        raise MalformedDescriptor(token.text, row_text)
    return int(match.group(1))


def assign_perf_level(rows: List[Row], l2_level: int) -> int:
    """
    Performance level for a new row.
    Rows sharing an L2 level share a perf level; a new L2 level gets the
    previous row's level plus one. Rows are assumed to arrive in ascending
    frequency order, which is what the kernel tables use.
    """
    for row in rows:
        if row.l2_level == l2_level:
            return row.perf_level
    if not rows:
        return 1
    return rows[-1].perf_level + 1


def parse_row(tier, rows: List[Row], text: str, matchers: OppMatchers,
              layout: TierLayout = PVS_TABLE) -> Optional[Row]:
    """
    Build a Row from one first-tier row initializer.
    Returns None for rows the kernel does not use for scaling.
    `rows` is only read, to assign the perf level.
    """
    slot = resolve_tier(tier, layout)
    tokens = iter(RowTokens(text, matchers))

    use_for_scaling = parse_number(take(tokens, 0, text), ROW_FIELDS[0], matchers, text)
    if use_for_scaling == 0:
        return None

    frequency = parse_number(take_inner(tokens, 1, text), ROW_FIELDS[1], matchers, text)
    is_pll8 = take_inner(tokens, 2, text).text == PLL8_SOURCE
    take_inner(tokens, 3, text)  # source selector
    take_inner(tokens, 4, text)  # PLL L value
    l2_level = parse_l2_level(take(tokens, 5, text), matchers, text)
    voltage = parse_number(take(tokens, 6, text), ROW_FIELDS[6], matchers, text)

    return Row(
        frequency=frequency,
        is_pll8=is_pll8,
        l2_level=l2_level,
        perf_level=assign_perf_level(rows, l2_level),
        voltages={slot: voltage},
    )


def parse_frequency_voltage(text: str, matchers: OppMatchers):
    """(frequency, voltage) of a row, ignoring every other field"""
    tokens = RowTokens(text, matchers)
    freq_token = tokens.nth(1)
    if freq_token is None:
        raise MissingField(ROW_FIELDS[1], 1, text)
    voltage_token = tokens.nth(6)
    if voltage_token is None:
        raise MissingField(ROW_FIELDS[6], 6, text)
    return (parse_number(freq_token, ROW_FIELDS[1], matchers, text),
            parse_number(voltage_token, ROW_FIELDS[6], matchers, text))
