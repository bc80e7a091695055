"""
Pytest configuration and shared fixtures.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

# Add the project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from hirasub.dictionary import DictionaryTable, parse_dictionary
from tests.fixtures import SAMPLE_DICTIONARY_TSV, MESSY_DICTIONARY_TSV


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "script: mark test as exercising a scripts/ tool")


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def no_dictionary_override(monkeypatch):
    """Keep a developer's HIRASUB_DICT from leaking into tests."""
    monkeypatch.delenv("HIRASUB_DICT", raising=False)


# ============================================================================
# Table Fixtures
# ============================================================================


@pytest.fixture
def sample_table():
    """Table parsed from the sample dictionary."""
    return parse_dictionary(SAMPLE_DICTIONARY_TSV)


@pytest.fixture
def empty_table():
    """Table with no entries."""
    return DictionaryTable.empty()


@pytest.fixture
def sample_dict_file(tmp_path):
    """Sample dictionary written to disk."""
    path = tmp_path / "dict.tsv"
    path.write_text(SAMPLE_DICTIONARY_TSV, encoding="utf-8")
    return path


@pytest.fixture
def messy_dict_file(tmp_path):
    """Dictionary with dropped rows and a duplicate key written to disk."""
    path = tmp_path / "messy.tsv"
    path.write_text(MESSY_DICTIONARY_TSV, encoding="utf-8")
    return path


# ============================================================================
# Script Fixtures
# ============================================================================


@pytest.fixture
def check_dictionary_script():
    """Import scripts/check_dictionary.py as a module."""
    path = PROJECT_ROOT / "scripts" / "check_dictionary.py"
    spec = importlib.util.spec_from_file_location("check_dictionary", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
