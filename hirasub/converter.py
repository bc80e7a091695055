"""
Conversion engine for hirasub.

Both conversion and classification walk the normalized symbol sequence with
the same cursor and the same match_at() decision, so a symbol highlighted as
matched is always one that convert() substitutes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from hirasub.characters import is_hiragana, is_passthrough, to_symbols
from hirasub.dictionary import DictionaryTable


# =============================================================================
# Result Types
# =============================================================================

class Tag(Enum):
    """Per-symbol classification used for highlighting."""
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """
    Outcome of converting one source text.

    Attributes:
        output: Concatenated replacements and passthrough whitespace
        unmatched: Every non-whitespace symbol that produced no output, both
            hiragana without an entry and out-of-alphabet characters
    """
    output: str
    unmatched: FrozenSet[str]

    @property
    def unmatched_hiragana(self) -> FrozenSet[str]:
        """Unmatched symbols restricted to the alphabet (what a status line shows)."""
        return frozenset(ch for ch in self.unmatched if is_hiragana(ch))


class Step(NamedTuple):
    """
    One cursor step of the scan.

    `value` is the replacement for a dictionary match, the symbol itself for
    passthrough, and None when nothing is emitted.
    """
    start: int
    width: int
    tag: Tag
    value: Optional[str]


# =============================================================================
# Matching
# =============================================================================

def match_at(symbols: Sequence[str], i: int, table: DictionaryTable) -> Step:
    """
    Decide what the symbol at position i consumes.

    Longest match first: a two-symbol entry always beats a one-symbol entry
    at the same position. When the pair has no entry only the first symbol
    is tried; the second stays for the next step.
    """
    ch = symbols[i]

    if is_passthrough(ch):
        return Step(i, 1, Tag.PASSTHROUGH, ch)

    if not is_hiragana(ch):
        return Step(i, 1, Tag.UNMATCHED, None)

    if i + 1 < len(symbols) and is_hiragana(symbols[i + 1]):
        value = table.lookup_two(ch + symbols[i + 1])
        if value is not None:
            return Step(i, 2, Tag.MATCHED, value)

    value = table.lookup_one(ch)
    if value is not None:
        return Step(i, 1, Tag.MATCHED, value)

    return Step(i, 1, Tag.UNMATCHED, None)


def scan(symbols: Sequence[str], table: DictionaryTable) -> Iterator[Step]:
    """Walk a symbol sequence left to right, yielding each step."""
    i = 0
    while i < len(symbols):
        step = match_at(symbols, i, table)
        yield step
        i += step.width


# =============================================================================
# Main API
# =============================================================================

def convert(source: str, table: DictionaryTable) -> ConversionResult:
    """
    Substitute dictionary values into hiragana text.

    Args:
        source: Text to convert
        table: Dictionary to substitute from

    Returns:
        ConversionResult with the output string and unmatched symbols

    Example:
        >>> table = parse_dictionary("き\\tki\\nきゃ\\tkya\\n")
        >>> convert("きゃき", table).output
        'kyaki'
    """
    symbols = to_symbols(source)
    parts: List[str] = []
    unmatched = set()

    for step in scan(symbols, table):
        if step.value is not None:
            parts.append(step.value)
        else:
            unmatched.add(symbols[step.start])

    return ConversionResult(output="".join(parts), unmatched=frozenset(unmatched))


def classify(source: str, table: DictionaryTable) -> Tuple[Tag, ...]:
    """
    Tag every symbol of the normalized source.

    The result has one tag per symbol of normalize(source); a two-symbol
    match tags both of its positions as matched.
    """
    symbols = to_symbols(source)
    tags: List[Tag] = []
    for step in scan(symbols, table):
        tags.extend([step.tag] * step.width)
    return tuple(tags)


def highlight_runs(source: str, table: DictionaryTable) -> List[Tuple[Tag, str]]:
    """
    Group the normalized source into maximal runs sharing one tag.

    Joining the run texts gives back normalize(source).
    """
    symbols = to_symbols(source)
    runs: List[Tuple[Tag, str]] = []

    for step in scan(symbols, table):
        text = "".join(symbols[step.start:step.start + step.width])
        if runs and runs[-1][0] is step.tag:
            runs[-1] = (step.tag, runs[-1][1] + text)
        else:
            runs.append((step.tag, text))

    return runs
