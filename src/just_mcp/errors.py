from __future__ import annotations

from enum import Enum


class RecipeNameProblem(str, Enum):
    """Why a recipe name was rejected.

    Example:
        ```python
        reason = RecipeNameProblem.LEADING_DASH
        ```
    """

    EMPTY = "empty"
    LEADING_DASH = "leading_dash"
    INVALID_CHARACTERS = "invalid_characters"


class InvalidArgumentError(ValueError):
    """Raised when a tool argument fails validation.

    Example:
        ```python
        raise InvalidArgumentError("Recipe name must be a non-empty string", field="recipe")
        ```
    """

    def __init__(
        self,
        message: str,
        *,
        field: str,
        reason: RecipeNameProblem | None = None,
    ) -> None:
        """Store the offending field and the rejection reason.

        Example:
            ```python
            err = InvalidArgumentError("bad", field="recipe", reason=RecipeNameProblem.EMPTY)
            ```
        """
        super().__init__(message)
        self.field = field
        self.reason = reason


class UnknownOperationError(LookupError):
    """Raised when a tool name is not in the registry.

    Example:
        ```python
        raise UnknownOperationError("delete")
        ```
    """

    def __init__(self, name: str) -> None:
        """Build the `Unknown tool: <name>` message.

        Example:
            ```python
            err = UnknownOperationError("delete")
            ```
        """
        super().__init__(f"Unknown tool: {name}")
        self.name = name
