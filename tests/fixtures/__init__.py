# Test fixtures
from .sample_dictionaries import (
    SAMPLE_DICTIONARY_TSV,
    MESSY_DICTIONARY_TSV,
    MESSY_REJECTED_LINES,
)

__all__ = [
    "SAMPLE_DICTIONARY_TSV",
    "MESSY_DICTIONARY_TSV",
    "MESSY_REJECTED_LINES",
]
