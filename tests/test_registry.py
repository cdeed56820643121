import pytest

from just_mcp import DEFAULT_TIMEOUT_MS, REGISTRY


def test_registry_exposes_three_tools_in_order() -> None:
    assert list(REGISTRY) == ["list", "run", "show"]


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        REGISTRY["delete"] = REGISTRY["run"]  # type: ignore[index]


def test_required_arguments() -> None:
    assert REGISTRY["list"].required == []
    assert REGISTRY["run"].required == ["recipe"]
    assert REGISTRY["show"].required == ["recipe"]


def test_run_schema_shape() -> None:
    schema = REGISTRY["run"].input_schema()
    assert schema["type"] == "object"
    assert schema["required"] == ["recipe"]
    assert schema["properties"]["args"] == {
        "type": "array",
        "items": {"type": "string"},
        "description": "Arguments to pass to the recipe",
    }
    assert schema["properties"]["timeout"]["type"] == "number"
    assert str(DEFAULT_TIMEOUT_MS) in schema["properties"]["timeout"]["description"]


def test_list_schema_has_no_required_key() -> None:
    schema = REGISTRY["list"].input_schema()
    assert "required" not in schema
    assert set(schema["properties"]) == {"working_directory", "justfile"}


def test_input_schema_is_a_fresh_copy() -> None:
    schema = REGISTRY["show"].input_schema()
    schema["properties"].clear()
    assert "recipe" in REGISTRY["show"].input_schema()["properties"]
