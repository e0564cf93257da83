#!/usr/bin/env python3
"""Unit tests for TableLoader - file formats, configuration and CSV snapshots."""

import json

import pytest
from jsonschema import ValidationError

from askalot_table.core.table_loader import TableLoader
from askalot_table.errors import RowShapeError
from askalot_table.models.table import SparseTable, NO_VALUE


@pytest.mark.unit
@pytest.mark.loader
class TestTableLoader:
    """Test loading and saving table files."""

    def test_load_csv(self, sample_files):
        loader = TableLoader(table_dir=sample_files)
        table = loader.load_from_file("scores.csv")

        assert table.title == "scores"
        assert table.rows == ("r1", "r2", "r3")
        assert table.get("r2", "c2") == 3

    def test_load_csv_accumulate(self, table_dir):
        (table_dir / "dup.csv").write_text(",c\nr,1\nr,4\n")
        loader = TableLoader(table_dir=table_dir)

        assert loader.load_from_file("dup.csv").get("r", "c") == 4
        assert loader.load_from_file("dup.csv", overwrite=False).get("r", "c") == 5

    def test_load_json(self, sample_files):
        table = TableLoader(table_dir=sample_files).load_from_file("records.json")

        assert table.title == "id"
        assert table.cols == ("c1", "c2", "c3")
        assert table.get("r2", "c3") == 23
        assert table.get("r2", "c2") is NO_VALUE

    def test_yaml_matches_json(self, sample_files):
        loader = TableLoader(table_dir=sample_files)
        assert loader.load_from_file("records.yaml") == loader.load_from_file("records.json")

    def test_custom_row_key(self, table_dir):
        (table_dir / "people.json").write_text('[{"name": "ann", "age": 31}]')
        table = TableLoader(table_dir=table_dir).load_from_file("people.json", row_key_field="name")
        assert table.get("ann", "age") == 31

    def test_missing_file(self, table_dir):
        with pytest.raises(FileNotFoundError):
            TableLoader(table_dir=table_dir).load_from_file("missing.csv")

    def test_unsupported_suffix(self, sample_files):
        with pytest.raises(ValueError):
            TableLoader(table_dir=sample_files).load_from_file("notes.txt")

    def test_malformed_csv(self, table_dir):
        (table_dir / "bad.csv").write_text("t,c1,c2\nr1,1\n")
        with pytest.raises(RowShapeError):
            TableLoader(table_dir=table_dir).load_from_file("bad.csv")

    def test_schema_from_env(self, sample_files, tmp_path, monkeypatch):
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps({"type": "array", "maxItems": 1}))
        monkeypatch.setenv("TABLE_SCHEMA", str(schema_path))

        loader = TableLoader(table_dir=sample_files)
        assert loader.schema_path == schema_path
        with pytest.raises(ValidationError):
            loader.load_from_file("records.json")

    def test_missing_schema_from_env(self, table_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("TABLE_SCHEMA", str(tmp_path / "nope.json"))
        assert TableLoader(table_dir=table_dir).schema_path is None

    def test_table_dir_from_env(self, table_dir, monkeypatch):
        monkeypatch.setenv("TABLE_DIR", str(table_dir))
        assert TableLoader().table_dir == table_dir

    def test_default_table_dir(self, monkeypatch):
        monkeypatch.delenv("TABLE_DIR", raising=False)
        assert str(TableLoader().table_dir) == "data/tables"

    def test_save_csv(self, table_dir):
        table = SparseTable(0, "t")
        table.set("r1", "c1", 1)
        table.set("r2", "c2", 2)

        loader = TableLoader(table_dir=table_dir)
        path = loader.save_csv(table, "out/saved.csv")

        assert path.read_text() == "t,c1,c2\nr1,1,0\nr2,0,2\n"
        loaded = loader.load_from_file("out/saved.csv")
        assert loaded.rows == table.rows
        assert loaded.get_row("r2") == table.get_row("r2")

    def test_list_available_files(self, sample_files):
        files = TableLoader(table_dir=sample_files).list_available_files()
        assert files == ["records.json", "records.yaml", "scores.csv"]

    def test_paths_outside_table_dir(self, tmp_path):
        table_dir = tmp_path / "tables"
        table_dir.mkdir()
        (tmp_path / "secret.csv").write_text("s,c\nr,42\n")
        loader = TableLoader(table_dir=table_dir)

        with pytest.raises(ValueError):
            loader.load_from_file("../secret.csv")
        with pytest.raises(ValueError):
            loader.load_from_file(str(tmp_path / "secret.csv"))
        with pytest.raises(ValueError):
            loader.save_csv(SparseTable(), "../escaped.csv")
        assert not (tmp_path / "escaped.csv").exists()

    def test_nested_path_inside_table_dir(self, table_dir):
        loader = TableLoader(table_dir=table_dir)
        assert loader.get_file_path("sub/../a.csv") == (table_dir / "a.csv").resolve()

    def test_list_missing_dir(self, tmp_path):
        assert TableLoader(table_dir=tmp_path / "none").list_available_files() == []
