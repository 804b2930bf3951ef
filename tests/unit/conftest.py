"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from sortable_tree.core.importer.json_reader import tree_to_data
from tests.unit.fakes import SAMPLE_DATA, SIMPLE_TREE


@pytest.fixture
def simple_file(tmp_path: Path) -> Path:
    """Write SIMPLE_TREE as nested JSON and return its path."""
    path = tmp_path / "simple.json"
    path.write_text(json.dumps(tree_to_data(SIMPLE_TREE)))
    return path


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Write SAMPLE_DATA to a JSON file and return its path."""
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(SAMPLE_DATA))
    return path
