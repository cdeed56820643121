import pytest

from just_mcp import InvalidArgumentError, RecipeNameProblem, UnknownOperationError
from just_mcp.translator import base_args, parse_arguments, translate, validate_recipe_name


@pytest.mark.parametrize("name", ["build", "test_all", "lint-fix", "a", "A1_b-2", "release2024"])
def test_valid_recipe_names_pass_through(name: str) -> None:
    assert validate_recipe_name(name) == name


@pytest.mark.parametrize(
    ("value", "reason", "message"),
    [
        (None, RecipeNameProblem.EMPTY, "Recipe name must be a non-empty string"),
        (42, RecipeNameProblem.EMPTY, "Recipe name must be a non-empty string"),
        ("", RecipeNameProblem.EMPTY, "Recipe name must be a non-empty string"),
        ("   ", RecipeNameProblem.EMPTY, "Recipe name must be a non-empty string"),
        ("-h", RecipeNameProblem.LEADING_DASH, "Recipe name cannot start with '-'"),
        ("--list", RecipeNameProblem.LEADING_DASH, "Recipe name cannot start with '-'"),
        ("build; rm -rf /", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("build\n", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("../build", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("build test", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("$(whoami)", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("'quoted'", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("bü ild", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
        ("bült", RecipeNameProblem.INVALID_CHARACTERS, "Recipe name contains invalid characters"),
    ],
)
def test_invalid_recipe_names_are_rejected(value: object, reason: RecipeNameProblem, message: str) -> None:
    with pytest.raises(InvalidArgumentError) as exc:
        validate_recipe_name(value)
    assert str(exc.value) == message
    assert exc.value.reason is reason
    assert exc.value.field == "recipe"


def test_base_args_always_disable_color() -> None:
    assert base_args() == ["--color=never"]
    assert base_args(None) == ["--color=never"]
    assert base_args("ci/justfile") == ["--color=never", "--justfile", "ci/justfile"]


def test_parse_arguments_ignores_wrongly_typed_fields() -> None:
    parsed = parse_arguments(
        {
            "working_directory": 7,
            "justfile": ["x"],
            "args": "not-a-list",
            "timeout": "1000",
        }
    )
    assert parsed.working_directory is None
    assert parsed.justfile is None
    assert parsed.args == ()
    assert parsed.timeout_ms is None


def test_parse_arguments_drops_non_string_args() -> None:
    parsed = parse_arguments({"args": ["--release", 1, None, "-v", {"a": 1}]})
    assert parsed.args == ("--release", "-v")


@pytest.mark.parametrize("timeout", [True, False, float("nan"), float("inf"), 10**400, -(10**400), None])
def test_parse_arguments_rejects_non_numeric_timeouts(timeout: object) -> None:
    assert parse_arguments({"timeout": timeout}).timeout_ms is None


def test_parse_arguments_handles_missing_bag() -> None:
    parsed = parse_arguments(None)
    assert parsed.recipe is None
    assert parsed.args == ()


def test_translate_list() -> None:
    request = translate("list", {"working_directory": "/repo"})
    assert request.argv == ("--color=never", "--list")
    assert request.working_directory == "/repo"
    assert request.timeout_ms == 300_000


def test_translate_show_with_justfile() -> None:
    request = translate("show", {"recipe": "build", "justfile": "other.just"})
    assert request.argv == ("--color=never", "--justfile", "other.just", "--show", "build")


def test_translate_run_example_scenario() -> None:
    request = translate(
        "run",
        {"recipe": "build", "args": ["--release"], "working_directory": "/repo"},
    )
    assert request.argv == ("--color=never", "build", "--release")
    assert request.working_directory == "/repo"


def test_translate_run_keeps_each_arg_as_one_token() -> None:
    request = translate("run", {"recipe": "echo", "args": ["hello world", "$(id)", "a;b"]})
    assert request.argv == ("--color=never", "echo", "hello world", "$(id)", "a;b")


def test_translate_run_honours_timeout() -> None:
    assert translate("run", {"recipe": "build", "timeout": 1500}).timeout_ms == 1500
    assert translate("run", {"recipe": "build", "timeout": "soon"}).timeout_ms == 300_000


def test_translate_only_run_honours_timeout() -> None:
    assert translate("list", {"timeout": 10}).timeout_ms == 300_000
    assert translate("show", {"recipe": "build", "timeout": 10}).timeout_ms == 300_000


def test_translate_uses_configured_default_timeout() -> None:
    assert translate("list", {}, default_timeout_ms=5000).timeout_ms == 5000


def test_translate_empty_working_directory_means_current() -> None:
    assert translate("list", {"working_directory": ""}).working_directory is None


def test_translate_requires_recipe_for_show_and_run() -> None:
    with pytest.raises(InvalidArgumentError, match="non-empty string"):
        translate("show", {})
    with pytest.raises(InvalidArgumentError, match="cannot start with '-'"):
        translate("run", {"recipe": "--evaluate"})


def test_translate_unknown_operation() -> None:
    with pytest.raises(UnknownOperationError, match="Unknown tool: delete"):
        translate("delete", {})
