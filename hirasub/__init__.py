"""
hirasub: Dictionary-driven hiragana substitution

Replaces each hiragana, or adjacent pair of hiragana, with a value from a
tab-separated dictionary, longest match first. Whitespace passes through,
everything else is reported as unmatched.

Basic Usage:
    import hirasub

    table = hirasub.parse_dictionary("か\\tka\\nきゃ\\tkya\\n")
    result = hirasub.convert("きゃか", table)
    print(result.output)        # kyaka
    print(result.unmatched)     # frozenset()
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from hirasub.characters import is_hiragana, normalize
from hirasub.converter import (
    ConversionResult,
    Tag,
    classify,
    convert,
    highlight_runs,
)
from hirasub.dictionary import (
    DictionaryLoadError,
    DictionaryTable,
    get_dictionary_path,
    load_dictionary,
    parse_dictionary,
)
from hirasub.session import Session, format_status

__version__ = "0.1.0"


def get_version() -> str:
    """Get the library version."""
    return __version__


# =============================================================================
# Session Context (for batch processing)
# =============================================================================

@contextmanager
def session_context(path: Optional[Union[str, Path]] = None) -> Iterator[Session]:
    """
    Context manager for converting many texts against one dictionary.

    Loads the dictionary once; a load failure leaves the session on an
    empty table with `load_error` set.

    Example:
        >>> with hirasub.session_context("my_dict.tsv") as session:
        ...     for text in texts:
        ...         print(session.convert(text).output)
    """
    yield Session.open(path)


# =============================================================================
# Module-level exports
# =============================================================================

__all__ = [
    # Data classes
    "ConversionResult",
    "DictionaryTable",
    "Tag",
    # Dictionary
    "parse_dictionary",
    "load_dictionary",
    "get_dictionary_path",
    # Conversion
    "convert",
    "classify",
    "highlight_runs",
    "normalize",
    "is_hiragana",
    # Application glue
    "Session",
    "session_context",
    "format_status",
    # Exceptions
    "DictionaryLoadError",
    # Version
    "get_version",
    "__version__",
]
