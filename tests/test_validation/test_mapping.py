"""Tests for specex.validation.mapping."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from specex.models import ErrorType, ValidationStatistics
from specex.validation import validate_examples_by_map
from specex.validation.mapping import expand_glob


class TestExpandGlob:
    """Glob expansion of mapping file patterns."""

    def test_matches_are_sorted(self, external_dir: Path) -> None:
        maps = external_dir / "maps"
        assert expand_glob(str(maps / "map-*.json")) == [
            str(maps / "map-items.json"),
            str(maps / "map-pets.json"),
        ]

    def test_recursive_pattern(self, external_dir: Path) -> None:
        matches = expand_glob(str(external_dir / "**" / "map-*.json"))
        assert [os.path.basename(path) for path in matches] == [
            "map-broken.json",
            "map-items.json",
            "map-pets.json",
        ]

    def test_no_match(self, tmp_path: Path) -> None:
        pattern = str(tmp_path / "*.json")
        assert expand_glob(pattern) == []
        assert expand_glob(pattern, nonull=True) == [pattern]


class TestValidateExamplesByMap:
    """End-to-end mapping workflows against the external fixtures."""

    def test_paths_relative_to_mapping_file(self, external_dir: Path) -> None:
        maps = external_dir / "maps"
        response = validate_examples_by_map(
            str(external_dir / "spec.json"),
            str(maps / "map-*.json"),
            cwd_to_mapping_file=True,
        )
        assert [(e.data_path, e.message) for e in response.errors] == [
            (".id", "1 is not of type 'string'"),
            ("[1]", "2 is not of type 'string'"),
        ]
        items_error, pets_error = response.errors
        assert items_error.map_file_path == str(maps / "map-items.json")
        assert items_error.example_file_path == os.path.join(
            str(maps), "../examples/invalid.json"
        )
        assert pets_error.map_file_path == str(maps / "map-pets.json")
        assert response.statistics == ValidationStatistics(
            schemas_with_examples=2,
            examples_total=4,
            examples_without_schema=0,
            matching_file_paths_mapping=2,
        )

    def test_paths_relative_to_working_directory(
        self, external_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(external_dir / "maps")
        response = validate_examples_by_map(str(external_dir / "spec.json"), "map-items.json")
        assert len(response.errors) == 1
        assert response.errors[0].map_file_path == "map-items.json"
        assert response.errors[0].example_file_path == "../examples/invalid.json"
        assert response.statistics.examples_total == 2

    def test_broken_mapping_entries(self, external_dir: Path) -> None:
        mapping_file = str(external_dir / "broken" / "map-broken.json")
        response = validate_examples_by_map(
            str(external_dir / "spec.json"), mapping_file, cwd_to_mapping_file=True
        )
        assert [error.type for error in response.errors] == [
            ErrorType.JSON_PATH_NOT_FOUND,
            ErrorType.FILE_NOT_FOUND,
        ]
        assert response.errors[0].message == (
            "Path to schema can't be found: '$.paths./unknown.get.responses.200.schema'"
        )
        # never-written.json, listed under the unknown key, is not opened.
        assert response.errors[1].params == {
            "path": os.path.join(os.path.dirname(mapping_file), "../examples/missing.json")
        }
        assert all(error.map_file_path == mapping_file for error in response.errors)
        assert response.statistics == ValidationStatistics(
            schemas_with_examples=2,
            examples_total=1,
            matching_file_paths_mapping=1,
        )

    def test_no_matching_mapping_file(self, tmp_path: Path, external_dir: Path) -> None:
        pattern = str(tmp_path / "nothing-*.json")
        response = validate_examples_by_map(str(external_dir / "spec.json"), pattern)
        assert len(response.errors) == 1
        error = response.errors[0]
        assert error.type == ErrorType.FILE_NOT_FOUND
        assert error.message == f"No such file or directory: '{pattern}'"
        assert error.map_file_path is None
        assert response.statistics.matching_file_paths_mapping == 0
        assert response.valid is False

    def test_missing_spec_file(self, external_dir: Path) -> None:
        response = validate_examples_by_map(
            "/nonexistent/spec.json", str(external_dir / "maps" / "map-*.json")
        )
        assert [error.type for error in response.errors] == [ErrorType.FILE_NOT_FOUND] * 2
        assert response.statistics.matching_file_paths_mapping == 2

    def test_undecodable_mapping_and_example_files(
        self, tmp_path: Path, external_dir: Path
    ) -> None:
        (tmp_path / "map-a.json").write_bytes(b"{\xff}")
        (tmp_path / "bad.json").write_bytes(b'"\xff"')
        (tmp_path / "map-b.json").write_text(
            json.dumps({"$.paths./.get.responses.200.schema": "bad.json"}), encoding="utf-8"
        )
        response = validate_examples_by_map(
            str(external_dir / "spec.json"), str(tmp_path / "map-*.json"), cwd_to_mapping_file=True
        )
        assert [error.type for error in response.errors] == [ErrorType.ERROR, ErrorType.ERROR]
        assert response.errors[0].map_file_path is None
        assert response.errors[1].map_file_path == str(tmp_path / "map-b.json")
        assert response.statistics.matching_file_paths_mapping == 1

    def test_non_path_entry(self, tmp_path: Path, external_dir: Path) -> None:
        mapping_file = tmp_path / "map.json"
        mapping_file.write_text(
            json.dumps({"$.paths./.get.responses.200.schema": [1]}), encoding="utf-8"
        )
        response = validate_examples_by_map(str(external_dir / "spec.json"), str(mapping_file))
        assert len(response.errors) == 1
        assert response.errors[0].type == ErrorType.ERROR
        assert "must be a path, got int" in response.errors[0].message
