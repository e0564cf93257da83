"""Test configuration for askalot_table."""

import json

import pytest
from pathlib import Path
import tempfile


@pytest.fixture
def table_dir():
    """Create temporary table directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "tables"
        path.mkdir()
        yield path


@pytest.fixture
def sample_csv_content():
    """Sample CSV table."""
    return "scores,c1,c2\nr1,1,0\nr2,3,3\nr3,0,2\n"


@pytest.fixture
def sample_records():
    """Sample flat records keyed by 'id'."""
    return [
        {"id": "r1", "c1": 11, "c2": 12},
        {"id": "r2", "c1": 21, "c3": 23},
    ]


@pytest.fixture
def sample_files(table_dir, sample_csv_content, sample_records):
    """Write the same kind of data as CSV, JSON and YAML files."""
    (table_dir / "scores.csv").write_text(sample_csv_content)
    (table_dir / "records.json").write_text(json.dumps(sample_records))
    (table_dir / "records.yaml").write_text(
        "- id: r1\n  c1: 11\n  c2: 12\n"
        "- id: r2\n  c1: 21\n  c3: 23\n"
    )
    (table_dir / "notes.txt").write_text("ignored")
    return table_dir
