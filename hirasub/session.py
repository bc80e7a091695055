"""
Application-side owner of the live dictionary.

The conversion functions take the table as an argument and keep no state.
A Session holds the one table an application is currently using, replaces
it wholesale on reload, and falls back to an empty table when the file
cannot be loaded so that conversion keeps working (every hiragana then
reports as unregistered).
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from hirasub.converter import ConversionResult, Tag, classify, convert
from hirasub.dictionary import (
    DictionaryLoadError,
    DictionaryTable,
    load_dictionary,
    parse_dictionary,
)

logger = logging.getLogger(__name__)


def format_status(
    table: DictionaryTable,
    result: Optional[ConversionResult] = None,
    load_error: Optional[str] = None,
) -> str:
    """
    Build the one-line status shown next to the converter.

    Example:
        "dictionary: 71 one-symbol / 36 two-symbol / unregistered: ゐゑ"
    """
    parts = []
    if load_error:
        parts.append(f"dictionary load failed: {load_error}")
    parts.append(
        f"dictionary: {table.one_symbol_count} one-symbol / "
        f"{table.two_symbol_count} two-symbol"
    )
    if result is not None and result.unmatched_hiragana:
        parts.append("unregistered: " + "".join(sorted(result.unmatched_hiragana)))
    return " / ".join(parts)


class Session:
    """Holds the live table and the outcome of the last load."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        table: Optional[DictionaryTable] = None,
    ):
        self.path = Path(path) if path is not None else None
        self.table = table if table is not None else DictionaryTable.empty()
        self.load_error: Optional[str] = None

    @classmethod
    def open(cls, path: Optional[Union[str, Path]] = None) -> "Session":
        """Create a session and load its dictionary."""
        session = cls(path)
        session.reload()
        return session

    def reload(self) -> DictionaryTable:
        """
        Load the dictionary file again and swap it in.

        On failure the error is logged and kept in `load_error`, and the
        live table becomes empty.
        """
        try:
            table = load_dictionary(self.path)
        except DictionaryLoadError as e:
            logger.warning(f"Using an empty dictionary: {e}")
            self.table = DictionaryTable.empty()
            self.load_error = str(e)
        else:
            self.table = table
            self.load_error = None
        return self.table

    def load_text(self, text: str) -> DictionaryTable:
        """Replace the live table with one parsed from text."""
        self.table = parse_dictionary(text)
        self.load_error = None
        return self.table

    def convert(self, source: str) -> ConversionResult:
        return convert(source, self.table)

    def classify(self, source: str) -> Tuple[Tag, ...]:
        return classify(source, self.table)

    def status(self, result: Optional[ConversionResult] = None) -> str:
        return format_status(self.table, result, self.load_error)
