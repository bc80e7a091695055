"""
Unit tests for the conversion engine.
"""

import pytest

from hirasub.characters import is_hiragana, normalize, to_symbols
from hirasub.converter import (
    ConversionResult,
    Step,
    Tag,
    classify,
    convert,
    highlight_runs,
    match_at,
)
from hirasub.dictionary import DictionaryTable, parse_dictionary

M = Tag.MATCHED
U = Tag.UNMATCHED
P = Tag.PASSTHROUGH


def make_table(**tiers) -> DictionaryTable:
    return DictionaryTable(tiers.get("one", {}), tiers.get("two", {}))


# Inputs used for the convert/classify agreement checks
AGREEMENT_SOURCES = [
    "",
    "きゃき",
    "きききゃ",
    "かな きゃ\nっかX",
    "ゐゑを",
    "あXい\tABC",
    "\u304b\u3099\u304d\u3099\u3083",
    "っっか",
    "   \r\n",
]


class TestConvert:
    """Tests for convert()."""

    def test_one_symbol_entries(self, sample_table):
        result = convert("あかい", sample_table)
        assert result == ConversionResult(output="akai", unmatched=frozenset())

    def test_two_symbol_match_wins(self):
        table = make_table(one={"き": "Y", "ゃ": "Z"}, two={"きゃ": "X"})
        assert convert("きゃ", table).output == "X"

    def test_no_shifted_retry(self):
        table = make_table(one={"き": "Y"})
        result = convert("きゃ", table)
        assert result.output == "Y"
        assert result.unmatched == {"ゃ"}

    def test_greedy_left_to_right(self):
        # かき is taken first, leaving ゃ alone even though きゃ exists
        table = make_table(one={"か": "ka"}, two={"かき": "KK", "きゃ": "kya"})
        result = convert("かきゃ", table)
        assert result.output == "KK"
        assert result.unmatched == {"ゃ"}

    def test_second_symbol_evaluated_independently(self):
        table = make_table(one={"き": "ki", "ゃ": "ya"})
        assert convert("きゃ", table).output == "kiya"

    def test_pair_at_end_of_input(self, sample_table):
        assert convert("かき", sample_table).output == "kaki"

    def test_whitespace_preserved(self):
        table = make_table(one={"あ": "1", "い": "2"})
        assert convert("あ\nい", table).output == "1\n2"

    def test_all_passthrough_characters(self):
        table = make_table(one={"あ": "1", "い": "2"})
        assert convert(" あ\t\r\nい ", table).output == " 1\t\r\n2 "

    def test_whitespace_breaks_pairs(self):
        table = make_table(one={"あ": "1", "い": "2"}, two={"あい": "X"})
        assert convert("あ い", table).output == "1 2"

    def test_out_of_alphabet_dropped(self):
        table = make_table(one={"あ": "1", "い": "2"})
        result = convert("あXい", table)
        assert result.output == "12"
        assert result.unmatched == {"X"}
        assert result.unmatched_hiragana == frozenset()

    def test_out_of_alphabet_breaks_pairs(self):
        table = make_table(one={"あ": "1", "い": "2"}, two={"あい": "X"})
        assert convert("あXい", table).output == "12"

    def test_ideographic_space_is_not_passthrough(self):
        table = make_table(one={"あ": "1", "い": "2"})
        result = convert("あ\u3000い", table)
        assert result.output == "12"
        assert result.unmatched == {"\u3000"}

    def test_katakana_is_out_of_alphabet(self, sample_table):
        result = convert("カか", sample_table)
        assert result.output == "ka"
        assert result.unmatched == {"カ"}

    def test_empty_table(self, empty_table):
        result = convert("かなかゐ", empty_table)
        assert result.output == ""
        assert result.unmatched == {"か", "な", "ゐ"}

    def test_empty_table_keeps_whitespace(self, empty_table):
        result = convert("か な\n", empty_table)
        assert result.output == " \n"
        assert result.unmatched == {"か", "な"}

    def test_empty_source(self, sample_table):
        assert convert("", sample_table) == ConversionResult("", frozenset())

    def test_unmatched_is_deduplicated(self, empty_table):
        assert convert("ゐゐゐ", empty_table).unmatched == {"ゐ"}

    def test_unmatched_hiragana_filter(self, sample_table):
        result = convert("ゐXゑ", sample_table)
        assert result.unmatched == {"ゐ", "X", "ゑ"}
        assert result.unmatched_hiragana == {"ゐ", "ゑ"}

    def test_empty_value_silences_symbol(self):
        table = make_table(one={"か": "", "き": "ki"})
        result = convert("かき", table)
        assert result.output == "ki"
        assert result.unmatched == frozenset()

    def test_value_emitted_verbatim(self):
        table = parse_dictionary("あ\t a\tb\n")
        assert convert("ああ", table).output == " a\tb a\tb"

    def test_decomposed_source_matches_composed_key(self):
        table = make_table(one={"\u304c": "ga"})
        assert convert("\u304b\u3099", table).output == "ga"

    def test_decomposed_source_matches_pair_key(self):
        table = make_table(two={"\u304e\u3083": "gya"})
        assert convert("\u304d\u3099\u3083", table).output == "gya"

    def test_deterministic(self, sample_table):
        source = "かな きゃ\nっかX"
        assert convert(source, sample_table) == convert(source, sample_table)

    def test_result_is_frozen(self, sample_table):
        result = convert("か", sample_table)
        with pytest.raises(AttributeError):
            result.output = "changed"

    def test_bundled_dictionary(self):
        from hirasub.dictionary import load_dictionary

        result = convert("きゃっと しゃしん", load_dictionary())
        assert result.output == "kyatto shashin"


class TestClassify:
    """Tests for classify()."""

    def test_tags(self, sample_table):
        assert classify("きゃ き\nX", sample_table) == (M, M, P, M, P, U)

    def test_unmatched_hiragana(self, sample_table):
        assert classify("かゐ", sample_table) == (M, U)

    def test_no_shifted_retry(self):
        table = make_table(one={"き": "Y"})
        assert classify("きゃ", table) == (M, U)

    def test_aligned_with_normalized_source(self, sample_table):
        source = "\u304b\u3099\u304b"
        tags = classify(source, sample_table)
        assert len(tags) == len(normalize(source)) == 2
        assert tags == (U, M)

    def test_empty_table(self, empty_table):
        assert classify("か な", empty_table) == (U, P, U)

    def test_empty_source(self, sample_table):
        assert classify("", sample_table) == ()

    @pytest.mark.parametrize("source", AGREEMENT_SOURCES)
    def test_length_matches_symbols(self, sample_table, source):
        assert len(classify(source, sample_table)) == len(to_symbols(source))

    @pytest.mark.parametrize("source", AGREEMENT_SOURCES)
    def test_agrees_with_convert(self, sample_table, source):
        symbols = to_symbols(source)
        tags = classify(source, sample_table)
        result = convert(source, sample_table)

        unmatched = {ch for ch, tag in zip(symbols, tags) if tag is U}
        assert unmatched == result.unmatched

        passthrough = "".join(ch for ch, tag in zip(symbols, tags) if tag is P)
        assert passthrough == "".join(ch for ch in result.output if ch in " \t\r\n")

        for ch, tag in zip(symbols, tags):
            if tag is M:
                assert is_hiragana(ch)

    @pytest.mark.parametrize("source", AGREEMENT_SOURCES)
    def test_deterministic(self, sample_table, source):
        assert classify(source, sample_table) == classify(source, sample_table)


class TestMatchAt:
    """Tests for the shared matching step."""

    def test_pair(self, sample_table):
        assert match_at(list("きゃ"), 0, sample_table) == Step(0, 2, M, "kya")

    def test_single(self, sample_table):
        assert match_at(list("きき"), 1, sample_table) == Step(1, 1, M, "ki")

    def test_passthrough(self, sample_table):
        assert match_at(["\t"], 0, sample_table) == Step(0, 1, P, "\t")

    def test_out_of_alphabet(self, sample_table):
        assert match_at(["X"], 0, sample_table) == Step(0, 1, U, None)

    def test_unmatched(self, sample_table):
        assert match_at(["ゐ", "か"], 0, sample_table) == Step(0, 1, U, None)


class TestHighlightRuns:
    """Tests for highlight_runs()."""

    def test_runs(self):
        table = make_table(one={"か": "ka"})
        assert highlight_runs("かゐかか", table) == [
            (M, "か"),
            (U, "ゐ"),
            (M, "かか"),
        ]

    def test_pair_kept_in_one_run(self, sample_table):
        assert highlight_runs("きゃ ゐ", sample_table) == [
            (M, "きゃ"),
            (P, " "),
            (U, "ゐ"),
        ]

    @pytest.mark.parametrize("source", AGREEMENT_SOURCES)
    def test_runs_rebuild_normalized_source(self, sample_table, source):
        runs = highlight_runs(source, sample_table)
        assert "".join(text for _, text in runs) == normalize(source)

    def test_empty_source(self, sample_table):
        assert highlight_runs("", sample_table) == []
