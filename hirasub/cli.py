"""
CLI interface for hirasub.

Usage:
    hirasub "きゃりー"
    hirasub --dict my_dict.tsv --status "ひらがな"
    hirasub --json "ひらがな"
    echo "ひらがな" | hirasub --highlight
"""

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from hirasub import __version__
from hirasub.characters import normalize
from hirasub.converter import ConversionResult, Tag, highlight_runs
from hirasub.dictionary import DictionaryTable
from hirasub.session import Session


# ============================================================================
# Output Formatting
# ============================================================================

# How whitespace symbols are written in --tags output
SYMBOL_ESCAPES = {
    ' ': '\\s',
    '\t': '\\t',
    '\n': '\\n',
    '\r': '\\r',
}

UNMATCHED_OPEN = '['
UNMATCHED_CLOSE = ']'


def format_default(result: ConversionResult) -> str:
    """Converted text, ending in exactly one newline unless it already has one."""
    if result.output.endswith('\n'):
        return result.output
    return result.output + '\n'


def format_highlight(runs: List[Tuple[Tag, str]]) -> str:
    """
    Source text with unmatched runs bracketed.

    Example:
        かゐか -> かか matched, ゐ unmatched -> "か[ゐ]か"
    """
    parts = []
    for tag, text in runs:
        if tag is Tag.UNMATCHED:
            parts.append(f"{UNMATCHED_OPEN}{text}{UNMATCHED_CLOSE}")
        else:
            parts.append(text)
    return "".join(parts) + "\n"


def format_tags(text: str, tags: Sequence[Tag]) -> str:
    """One `symbol<TAB>tag` line per normalized symbol."""
    lines = []
    for ch, tag in zip(normalize(text), tags):
        lines.append(f"{SYMBOL_ESCAPES.get(ch, ch)}\t{tag.value}")
    return "\n".join(lines) + "\n"


def format_json(
    text: str,
    table: DictionaryTable,
    result: ConversionResult,
    tags: Sequence[Tag],
) -> str:
    """Format the full conversion as JSON."""
    data = {
        "source": normalize(text),
        "output": result.output,
        "unmatched": sorted(result.unmatched),
        "unmatched_hiragana": sorted(result.unmatched_hiragana),
        "tags": [tag.value for tag in tags],
        "dictionary": {
            "one_symbol": table.one_symbol_count,
            "two_symbol": table.two_symbol_count,
        },
    }
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


# ============================================================================
# Main
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hirasub",
        description="Dictionary-driven hiragana substitution",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Hiragana text to convert (read from stdin if omitted)",
    )
    parser.add_argument(
        "--dict", "-D",
        dest="dictionary",
        default=None,
        help="Path to a tab-separated dictionary (default: $HIRASUB_DICT or the bundled dict.tsv)",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON",
    )
    output.add_argument(
        "--highlight", "-H",
        action="store_true",
        help="Echo the input with unmatched symbols in [brackets]",
    )
    output.add_argument(
        "--tags", "-t",
        action="store_true",
        help="Print each input symbol with its tag (matched, unmatched, passthrough)",
    )

    parser.add_argument(
        "--status", "-s",
        action="store_true",
        help="Print dictionary size and unregistered hiragana to stderr",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log dictionary loading and dropped lines",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"hirasub {__version__}",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    if args.text is None:
        # Read from stdin; whitespace is significant so nothing is stripped
        text = sys.stdin.read()
    else:
        text = args.text

    if not text:
        parser.print_help()
        sys.exit(1)

    try:
        session = Session.open(args.dictionary)
        result = session.convert(text)

        if args.json:
            sys.stdout.write(format_json(text, session.table, result, session.classify(text)))
        elif args.highlight:
            sys.stdout.write(format_highlight(highlight_runs(text, session.table)))
        elif args.tags:
            sys.stdout.write(format_tags(text, session.classify(text)))
        else:
            sys.stdout.write(format_default(result))

        if args.status:
            print(session.status(result), file=sys.stderr)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
