"""Unit tests for schema document assembly."""

from __future__ import annotations

import json

import pytest

from valet.exceptions import InvalidRootError, ValetError
from valet.schema import SCHEMA_URI, assemble_document, deep_merge
from valet.schema.values import Value


class TestAssembleDocument:
    """Test wrapping the root schema."""

    def test_schema_header_comes_first(self, value) -> None:
        doc = assemble_document(value({"a": 1})).to_dict()
        assert list(doc)[:2] == ["$schema", "type"]
        assert doc["$schema"] == SCHEMA_URI == "http://json-schema.org/schema#"

    def test_root_is_object(self, value) -> None:
        doc = assemble_document(value({"a": 1})).to_dict()
        assert doc["type"] == "object"
        assert doc["required"] == ["a"]

    @pytest.mark.parametrize("root", [[1, 2], "text", None, 3])
    def test_non_mapping_root_raises(self, value, root) -> None:
        with pytest.raises(InvalidRootError):
            assemble_document(value(root))

    def test_invalid_root_is_valet_error(self) -> None:
        with pytest.raises(ValetError):
            assemble_document(Value.sequence())

    def test_documented_example(self, value) -> None:
        """replicaCount/image/env example produces the expected shape."""
        doc = assemble_document(
            value(
                {
                    "replicaCount": 3,
                    "image": {"repository": "nginx", "tag": "stable"},
                    "env": [{"name": "LOG_LEVEL", "value": "debug"}],
                }
            )
        ).to_dict()

        assert doc["required"] == ["replicaCount", "image", "env"]
        assert doc["properties"]["image"]["type"] == "object"
        assert doc["properties"]["image"]["properties"]["repository"]["default"] == "nginx"
        assert doc["properties"]["env"]["items"]["properties"]["name"]["default"] == "LOG_LEVEL"

    def test_repeated_assembly_is_byte_identical(self, value) -> None:
        merged = deep_merge(value({"a": {"b": [1, {"c": ""}]}}), value({"d": 1.5}))
        first = json.dumps(assemble_document(merged).to_dict(), indent=2)
        second = json.dumps(assemble_document(merged).to_dict(), indent=2)
        assert first == second
