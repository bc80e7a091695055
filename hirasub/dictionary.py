"""
Substitution dictionary for hirasub.

A dictionary is a UTF-8, tab-separated text file:

    # comment
    あ<TAB>a
    きゃ<TAB>kya

Keys are one or two hiragana after trimming and NFC normalization. The value
is everything after the first tab, taken verbatim, and may be empty. Lines
that do not fit this shape are dropped without error so that one bad row
never blocks the rest of the file.

Parsed entries are frozen into two marisa_trie.BytesTrie tiers, one keyed by
single symbols and one by symbol pairs.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

import marisa_trie

from hirasub.characters import all_hiragana, normalize

logger = logging.getLogger(__name__)


# ============================================================================
# Line Scanning
# ============================================================================

COMMENT_PREFIX = '#'
SEPARATOR = '\t'

# Bare LF and CRLF line endings
_LINE_BREAK = re.compile(r'\r?\n')


class LineStatus(Enum):
    """Outcome of scanning one physical line of dictionary text."""
    ENTRY_ONE = "entry_one"
    ENTRY_TWO = "entry_two"
    BLANK = "blank"
    COMMENT = "comment"
    NO_TAB = "no_tab"
    BAD_KEY_LENGTH = "bad_key_length"
    OUT_OF_ALPHABET = "out_of_alphabet"


# Lines that carried content but were not accepted as entries
REJECTED_STATUSES = frozenset([
    LineStatus.NO_TAB,
    LineStatus.BAD_KEY_LENGTH,
    LineStatus.OUT_OF_ALPHABET,
])


@dataclass(frozen=True, slots=True)
class DictionaryLine:
    """
    One physical line of dictionary text.

    Attributes:
        lineno: 1-based line number
        text: The line as it appeared, without its line ending
        key: Normalized key, or None when the line has no separator
        value: Text after the first tab, or None when the line has no separator
        status: What the parser made of the line
    """
    lineno: int
    text: str
    key: Optional[str]
    value: Optional[str]
    status: LineStatus

    @property
    def is_entry(self) -> bool:
        return self.status in (LineStatus.ENTRY_ONE, LineStatus.ENTRY_TWO)


def _scan_line(lineno: int, raw: str) -> DictionaryLine:
    line = raw.rstrip()

    if not line:
        return DictionaryLine(lineno, raw, None, None, LineStatus.BLANK)
    if line.startswith(COMMENT_PREFIX):
        return DictionaryLine(lineno, raw, None, None, LineStatus.COMMENT)

    tab = line.find(SEPARATOR)
    if tab < 0:
        return DictionaryLine(lineno, raw, None, None, LineStatus.NO_TAB)

    key = normalize(line[:tab].strip())
    value = line[tab + 1:]

    if len(key) == 1:
        status = LineStatus.ENTRY_ONE
    elif len(key) == 2:
        status = LineStatus.ENTRY_TWO
    else:
        # Empty keys and keys of 3+ symbols
        return DictionaryLine(lineno, raw, key, value, LineStatus.BAD_KEY_LENGTH)

    if not all_hiragana(key):
        status = LineStatus.OUT_OF_ALPHABET

    return DictionaryLine(lineno, raw, key, value, status)


def scan_dictionary(text: str) -> Iterator[DictionaryLine]:
    """
    Classify every line of dictionary text.

    Args:
        text: Raw dictionary text

    Yields:
        One DictionaryLine per physical line, in order
    """
    for lineno, raw in enumerate(_LINE_BREAK.split(text), start=1):
        yield _scan_line(lineno, raw)


# ============================================================================
# Dictionary Table
# ============================================================================

def _freeze(mapping: Mapping[str, str]) -> marisa_trie.BytesTrie:
    return marisa_trie.BytesTrie(
        [(key, value.encode('utf-8')) for key, value in mapping.items()]
    )


def _thaw(trie: marisa_trie.BytesTrie) -> Dict[str, str]:
    return {key: value.decode('utf-8') for key, value in trie.items()}


class DictionaryTable:
    """
    Immutable two-tier lookup table.

    `one_symbol` maps a single hiragana to its replacement, `two_symbol` maps
    a pair of hiragana. Build one with parse_dictionary(); a reload builds a
    new table instead of mutating the old one.
    """

    __slots__ = ('_one', '_two')

    def __init__(
        self,
        one_symbol: Optional[Mapping[str, str]] = None,
        two_symbol: Optional[Mapping[str, str]] = None,
    ):
        one_symbol = one_symbol or {}
        two_symbol = two_symbol or {}

        for key in one_symbol:
            if len(key) != 1 or not all_hiragana(key):
                raise ValueError(f"one-symbol key must be a single hiragana: {key!r}")
        for key in two_symbol:
            if len(key) != 2 or not all_hiragana(key):
                raise ValueError(f"two-symbol key must be two hiragana: {key!r}")

        self._one = _freeze(one_symbol)
        self._two = _freeze(two_symbol)

    @classmethod
    def empty(cls) -> "DictionaryTable":
        """Table with no entries; every hiragana converts as unmatched."""
        return cls()

    def lookup_one(self, symbol: str) -> Optional[str]:
        """Get the replacement for a single symbol, or None."""
        values = self._one.get(symbol)
        if values is None:
            return None
        return values[0].decode('utf-8')

    def lookup_two(self, pair: str) -> Optional[str]:
        """Get the replacement for a two-symbol key, or None."""
        values = self._two.get(pair)
        if values is None:
            return None
        return values[0].decode('utf-8')

    @property
    def one_symbol(self) -> Dict[str, str]:
        """Snapshot of the one-symbol tier."""
        return _thaw(self._one)

    @property
    def two_symbol(self) -> Dict[str, str]:
        """Snapshot of the two-symbol tier."""
        return _thaw(self._two)

    @property
    def one_symbol_count(self) -> int:
        return len(self._one)

    @property
    def two_symbol_count(self) -> int:
        return len(self._two)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        return len(self._one) + len(self._two)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DictionaryTable):
            return NotImplemented
        return (
            self.one_symbol == other.one_symbol
            and self.two_symbol == other.two_symbol
        )

    def __hash__(self) -> int:
        return hash((
            frozenset(self.one_symbol.items()),
            frozenset(self.two_symbol.items()),
        ))

    def __repr__(self) -> str:
        return (
            f"DictionaryTable(one_symbol={self.one_symbol_count}, "
            f"two_symbol={self.two_symbol_count})"
        )


def parse_dictionary(text: str) -> DictionaryTable:
    """
    Parse dictionary text into a DictionaryTable.

    Never raises: blank lines and comments are skipped, malformed rows are
    dropped, and a later entry for the same key replaces an earlier one.

    Args:
        text: Raw dictionary text

    Returns:
        The parsed table

    Example:
        >>> table = parse_dictionary("か\\tka\\nきゃ\\tkya\\n")
        >>> table.lookup_two("きゃ")
        'kya'
    """
    one_symbol: Dict[str, str] = {}
    two_symbol: Dict[str, str] = {}

    for line in scan_dictionary(text):
        if line.status is LineStatus.ENTRY_ONE:
            one_symbol[line.key] = line.value
        elif line.status is LineStatus.ENTRY_TWO:
            two_symbol[line.key] = line.value
        elif line.status in REJECTED_STATUSES:
            logger.debug(f"Dropped dictionary line {line.lineno} ({line.status.value}): {line.text!r}")

    return DictionaryTable(one_symbol, two_symbol)


# ============================================================================
# Dictionary Loading
# ============================================================================

DICTIONARY_ENV_VAR = "HIRASUB_DICT"


class DictionaryLoadError(Exception):
    """Raised when a dictionary file cannot be read."""
    pass


def get_default_dictionary_path() -> Path:
    """Get the path of the dictionary shipped with the package."""
    return Path(__file__).parent / "data" / "dict.tsv"


def get_dictionary_path() -> Path:
    """
    Get the dictionary path to load when none is given.

    The HIRASUB_DICT environment variable wins over the packaged default.
    """
    override = os.environ.get(DICTIONARY_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_default_dictionary_path()


def load_dictionary(path: Optional[Union[str, Path]] = None) -> DictionaryTable:
    """
    Read and parse a dictionary file.

    Args:
        path: Path to a .tsv dictionary. Uses get_dictionary_path() if not specified.

    Returns:
        The parsed table

    Raises:
        DictionaryLoadError: If the file doesn't exist or isn't valid UTF-8
    """
    if path is None:
        path = get_dictionary_path()
    path = Path(path)

    try:
        # Decoded from bytes so line endings reach the parser untranslated;
        # utf-8-sig drops a leading byte order mark
        text = path.read_bytes().decode('utf-8-sig')
    except FileNotFoundError as e:
        raise DictionaryLoadError(f"Dictionary not found at {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DictionaryLoadError(f"Dictionary at {path} could not be read: {e}") from e

    table = parse_dictionary(text)
    logger.info(
        f"Loaded dictionary from {path} "
        f"({table.one_symbol_count} one-symbol, {table.two_symbol_count} two-symbol entries)"
    )
    return table
