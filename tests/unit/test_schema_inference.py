"""Unit tests for schema inference."""

from __future__ import annotations

from valet.schema.inference import infer_schema
from valet.schema.values import Value, ValueKind


class TestScalarInference:
    """Test type dispatch for scalar values."""

    def test_null_has_no_default(self) -> None:
        assert infer_schema(Value.null()).to_dict() == {"type": "null"}

    def test_boolean(self) -> None:
        assert infer_schema(Value.boolean(False)).to_dict() == {"type": "boolean", "default": False}

    def test_integer(self) -> None:
        assert infer_schema(Value.integer(3)).to_dict() == {"type": "integer", "default": 3}

    def test_float_is_number(self) -> None:
        assert infer_schema(Value.number(0.5)).to_dict() == {"type": "number", "default": 0.5}

    def test_integral_float_is_still_number(self, value) -> None:
        node = infer_schema(value(2.0))
        assert node.type is ValueKind.FLOAT
        assert node.to_dict()["default"] == 2.0

    def test_string(self) -> None:
        assert infer_schema(Value.string("nginx")).to_dict() == {"type": "string", "default": "nginx"}

    def test_empty_string_keeps_string_type(self) -> None:
        assert infer_schema(Value.string("")).to_dict() == {"type": "string", "default": ""}


class TestArrayInference:
    """Test array inference."""

    def test_empty_array_has_no_items(self, value) -> None:
        assert infer_schema(value([])).to_dict() == {"type": "array", "default": []}

    def test_items_from_first_element(self, value) -> None:
        schema = infer_schema(value([1, 2, 3])).to_dict()
        assert schema["items"] == {"type": "integer", "default": 1}
        assert schema["default"] == [1, 2, 3]

    def test_heterogeneous_array_is_not_widened(self, value) -> None:
        schema = infer_schema(value(["a", 1, {"k": "v"}])).to_dict()
        assert schema["items"] == {"type": "string", "default": "a"}
        assert schema["default"] == ["a", 1, {"k": "v"}]

    def test_array_of_objects(self, value) -> None:
        schema = infer_schema(value([{"name": "LOG_LEVEL", "value": "debug"}])).to_dict()
        items = schema["items"]
        assert items["type"] == "object"
        assert items["properties"]["name"]["default"] == "LOG_LEVEL"
        assert items["required"] == ["name", "value"]


class TestObjectInference:
    """Test object inference."""

    def test_empty_mapping(self, value) -> None:
        assert infer_schema(value({})).to_dict() == {
            "type": "object",
            "default": {},
            "properties": {},
            "required": [],
        }

    def test_properties_match_mapping_keys(self, value) -> None:
        node = infer_schema(value({"b": 1, "a": "x", "c": None}))
        assert list(node.properties) == ["b", "a", "c"]
        assert node.properties["c"].type is ValueKind.NULL

    def test_default_is_full_mapping(self, value) -> None:
        data = {"image": {"repository": "nginx", "tag": ""}, "extra": None}
        schema = infer_schema(value(data)).to_dict()
        assert schema["default"] == data
        assert schema["properties"]["image"]["default"] == data["image"]

    def test_key_order_of_serialized_node(self, value) -> None:
        schema = infer_schema(value({"a": 1})).to_dict()
        assert list(schema) == ["type", "default", "properties", "required"]

    def test_custom_policy_is_used(self, value) -> None:
        def require_all(mapping, properties):
            return list(properties)

        node = infer_schema(value({"a": "", "b": {"c": None}}), policy=require_all)
        assert node.required == ["a", "b"]
        assert node.properties["b"].required == ["c"]

    def test_inference_is_deterministic(self, value) -> None:
        data = value({"svc": {"enabled": False, "ports": [80, 443]}, "name": "x"})
        assert infer_schema(data).to_dict() == infer_schema(data).to_dict()
