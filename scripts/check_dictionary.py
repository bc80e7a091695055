#!/usr/bin/env python3
"""
Dictionary Checker for hirasub.

The parser drops malformed dictionary rows without complaint, which keeps a
half-edited file usable but hides typos. This script reports every dropped
row and every key that is defined more than once.

Usage:
    python scripts/check_dictionary.py [PATH] [--strict]
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hirasub.dictionary import (
    REJECTED_STATUSES,
    DictionaryLine,
    DictionaryLoadError,
    get_dictionary_path,
    load_dictionary,
    scan_dictionary,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


# ============================================================================
# Reasons
# ============================================================================

REASONS = {
    'no_tab': "no tab separator",
    'bad_key_length': "key is not one or two symbols",
    'out_of_alphabet': "key contains characters outside the hiragana range",
}


# ============================================================================
# Data Structures
# ============================================================================

@dataclass
class Duplicate:
    """A key defined again after an earlier entry."""
    key: str
    lineno: int
    previous_lineno: int


@dataclass
class CheckReport:
    """Everything found in one dictionary file."""
    entries: int = 0
    rejected: List[DictionaryLine] = field(default_factory=list)
    duplicates: List[Duplicate] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.rejected and not self.duplicates


# ============================================================================
# Checking
# ============================================================================

def check_text(text: str) -> CheckReport:
    """Scan dictionary text and collect dropped rows and duplicate keys."""
    report = CheckReport()
    seen: Dict[str, int] = {}

    for line in scan_dictionary(text):
        if line.is_entry:
            report.entries += 1
            if line.key in seen:
                report.duplicates.append(Duplicate(line.key, line.lineno, seen[line.key]))
            seen[line.key] = line.lineno
        elif line.status in REJECTED_STATUSES:
            report.rejected.append(line)

    return report


def log_report(path: Path, report: CheckReport):
    for line in report.rejected:
        logger.warning(f"{path}:{line.lineno}: dropped ({REASONS[line.status.value]}): {line.text!r}")

    for dup in report.duplicates:
        logger.warning(
            f"{path}:{dup.lineno}: key {dup.key!r} overrides the entry on line {dup.previous_lineno}"
        )

    logger.info(
        f"{report.entries} entries, {len(report.rejected)} dropped lines, "
        f"{len(report.duplicates)} duplicate keys"
    )


# ============================================================================
# Main
# ============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Report rows a hirasub dictionary would silently drop"
    )
    parser.add_argument(
        'path',
        type=Path,
        nargs='?',
        default=None,
        help=f"Dictionary to check (default: {get_dictionary_path()})"
    )
    parser.add_argument(
        '--strict',
        action='store_true',
        help="Exit with status 1 if any line was dropped or any key duplicated"
    )

    args = parser.parse_args(argv)
    path = args.path or get_dictionary_path()

    start_time = time.time()

    try:
        table = load_dictionary(path)
    except DictionaryLoadError as e:
        logger.error(str(e))
        return 1

    report = check_text(path.read_bytes().decode('utf-8-sig'))
    log_report(path, report)

    logger.info(
        f"Table holds {table.one_symbol_count} one-symbol and "
        f"{table.two_symbol_count} two-symbol keys"
    )

    elapsed = time.time() - start_time
    logger.info(f"Check completed in {elapsed:.2f} seconds")

    if args.strict and not report.clean:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
