from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_TIMEOUT_MS = 300_000


@dataclass(frozen=True, slots=True)
class ArgumentSpec:
    """One advertised argument of a tool.

    Example:
        ```python
        spec = ArgumentSpec("recipe", "string", "Recipe name to run", required=True)
        ```
    """

    name: str
    type: str
    description: str
    required: bool = False
    items_type: str | None = None

    def json_schema(self) -> dict[str, Any]:
        """Return the JSON-Schema fragment for this argument.

        Example:
            ```python
            fragment = ArgumentSpec("args", "array", "Extra args", items_type="string").json_schema()
            ```
        """
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.items_type is not None:
            schema["items"] = {"type": self.items_type}
        return schema


@dataclass(frozen=True, slots=True)
class OperationSpec:
    """Static description of one tool exposed to callers.

    Example:
        ```python
        spec = REGISTRY["run"]
        schema = spec.input_schema()
        ```
    """

    name: str
    description: str
    arguments: tuple[ArgumentSpec, ...]

    @property
    def required(self) -> list[str]:
        """Names of the arguments callers must supply.

        Example:
            ```python
            assert REGISTRY["show"].required == ["recipe"]
            ```
        """
        return [arg.name for arg in self.arguments if arg.required]

    def input_schema(self) -> dict[str, Any]:
        """Build a fresh JSON-Schema object describing the tool's arguments.

        Example:
            ```python
            schema = REGISTRY["list"].input_schema()
            ```
        """
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {arg.name: arg.json_schema() for arg in self.arguments},
        }
        if self.required:
            schema["required"] = self.required
        return schema


_WORKING_DIRECTORY = ArgumentSpec("working_directory", "string", "Directory containing the justfile")
_JUSTFILE = ArgumentSpec("justfile", "string", "Path to the justfile (optional)")


def _build_registry() -> Mapping[str, OperationSpec]:
    """Assemble the read-only tool catalog.

    Example:
        ```python
        registry = _build_registry()
        ```
    """
    operations = (
        OperationSpec(
            name="list",
            description="List available recipes in the justfile",
            arguments=(_WORKING_DIRECTORY, _JUSTFILE),
        ),
        OperationSpec(
            name="run",
            description="Run a recipe from the justfile",
            arguments=(
                ArgumentSpec("recipe", "string", "Recipe name to run", required=True),
                ArgumentSpec("args", "array", "Arguments to pass to the recipe", items_type="string"),
                _WORKING_DIRECTORY,
                _JUSTFILE,
                ArgumentSpec(
                    "timeout",
                    "number",
                    f"Timeout in milliseconds (default: {DEFAULT_TIMEOUT_MS})",
                ),
            ),
        ),
        OperationSpec(
            name="show",
            description="Show the definition of a recipe",
            arguments=(
                ArgumentSpec("recipe", "string", "Recipe name to show", required=True),
                _WORKING_DIRECTORY,
                _JUSTFILE,
            ),
        ),
    )
    return MappingProxyType({op.name: op for op in operations})


REGISTRY: Mapping[str, OperationSpec] = _build_registry()
