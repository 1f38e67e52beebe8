"""Unit tests for values file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from valet.exceptions import NotAMappingError, NotFoundError, ParseError, ReadError
from valet.loader import decode_values, find_values_file, load_values
from valet.schema.values import Value, ValueKind


class TestLoadValues:
    """Test loading values documents from disk."""

    def test_loads_mapping(self, write_yaml) -> None:
        path = write_yaml("values.yaml", "a: 1\nb:\n  c: [x, y]\n")
        result = load_values(path)
        assert result == Value.from_python({"a": 1, "b": {"c": ["x", "y"]}})

    def test_missing_file_raises_not_found(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.yaml"
        with pytest.raises(NotFoundError) as exc_info:
            load_values(missing)
        assert exc_info.value.path == str(missing)

    def test_invalid_yaml_raises_parse_error(self, write_yaml) -> None:
        path = write_yaml("bad.yaml", "a: 1\nkey: [unclosed\n")
        with pytest.raises(ParseError) as exc_info:
            load_values(path)
        assert exc_info.value.path == str(path)
        assert exc_info.value.line is not None

    def test_top_level_list_raises_not_a_mapping(self, write_yaml) -> None:
        path = write_yaml("list.yaml", "- a\n- b\n")
        with pytest.raises(NotAMappingError) as exc_info:
            load_values(path)
        assert exc_info.value.found == "array"

    def test_empty_file_is_empty_mapping(self, write_yaml) -> None:
        path = write_yaml("empty.yaml", "# only a comment\n")
        assert load_values(path) == Value.mapping()

    def test_float_and_int_literals(self, write_yaml) -> None:
        path = write_yaml("nums.yaml", "i: 1\nf: 1.0\ne: 1e3\n")
        entries = load_values(path).entries
        assert entries["i"].kind is ValueKind.INT
        assert entries["f"].kind is ValueKind.FLOAT
        assert entries["e"].kind is ValueKind.FLOAT

    @pytest.mark.parametrize("literal", ["1e3", "1E+3", "-2e-2", ".5e1", "6.02e23"])
    def test_exponent_literals_are_floats(self, write_yaml, literal: str) -> None:
        path = write_yaml("exp.yaml", f"x: {literal}\n")
        x = load_values(path).entries["x"]
        assert x.kind is ValueKind.FLOAT
        assert x.data == float(literal)

    @pytest.mark.parametrize("literal", ["1.16.0", "1e", "e3", "0x1F"])
    def test_non_float_literals_unchanged(self, write_yaml, literal: str) -> None:
        path = write_yaml("lit.yaml", f"x: {literal}\n")
        assert load_values(path).entries["x"].kind is not ValueKind.FLOAT

    def test_directory_raises_read_error(self, tmp_path: Path) -> None:
        with pytest.raises(ReadError) as exc_info:
            load_values(tmp_path)
        assert exc_info.value.path == str(tmp_path)


class TestDecodeValues:
    """Test decoding in-memory YAML."""

    def test_decodes_bytes(self) -> None:
        assert decode_values(b"x: true\n") == Value.from_python({"x": True})

    def test_scalar_document_raises(self) -> None:
        with pytest.raises(NotAMappingError) as exc_info:
            decode_values("just text", source="chart/values.yaml")
        assert "chart/values.yaml" in str(exc_info.value)


class TestFindValuesFile:
    """Test locating values.yaml / values.yml."""

    def test_prefers_values_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "values.yaml").write_text("a: 1\n")
        (tmp_path / "values.yml").write_text("a: 2\n")
        assert find_values_file(tmp_path) == tmp_path / "values.yaml"

    def test_falls_back_to_values_yml(self, tmp_path: Path) -> None:
        (tmp_path / "values.yml").write_text("a: 2\n")
        assert find_values_file(tmp_path) == tmp_path / "values.yml"

    def test_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="no values.yaml or values.yml"):
            find_values_file(tmp_path)
