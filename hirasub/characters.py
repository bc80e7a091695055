"""
Character classes for hirasub.

The alphabet is the hiragana block from ぁ (U+3041) to ゖ (U+3096). Membership
is a plain code point range test so that results do not depend on the
platform's Unicode tables or locale.
"""

import unicodedata
from typing import List


# =============================================================================
# Alphabet
# =============================================================================

HIRAGANA_FIRST = 0x3041  # ぁ
HIRAGANA_LAST = 0x3096   # ゖ

# Copied verbatim to the output and never looked up
PASSTHROUGH_CHARS = frozenset([' ', '\t', '\n', '\r'])

# Canonical composition, applied to dictionary keys and source text alike
NORMALIZATION_FORM = 'NFC'


def is_hiragana(ch: str) -> bool:
    """
    Check if a single character is an in-alphabet symbol.

    Args:
        ch: A one-character string

    Returns:
        True if the code point lies in U+3041..U+3096 inclusive
    """
    return len(ch) == 1 and HIRAGANA_FIRST <= ord(ch) <= HIRAGANA_LAST


def is_passthrough(ch: str) -> bool:
    """Check if a character is whitespace that is copied through unchanged."""
    return ch in PASSTHROUGH_CHARS


def normalize(text: str) -> str:
    """Apply the canonical normalization used before segmentation."""
    return unicodedata.normalize(NORMALIZATION_FORM, text)


def to_symbols(text: str) -> List[str]:
    """
    Normalize text and split it into code points.

    Positions reported by the converter refer to this list, not to the raw
    input, since composition can merge a base kana and a combining mark
    (e.g. "か" + U+3099 becomes "が").
    """
    return list(normalize(text))


def all_hiragana(symbols) -> bool:
    """Check that every symbol in a sequence is in-alphabet."""
    return all(is_hiragana(ch) for ch in symbols)
