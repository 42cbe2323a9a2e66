import pytest

from docweave.exceptions import MissingRequiredVariableError
from docweave.templates import TemplateVariable, resolve_variables


class TestResolveVariables:
    def test_provided_value_wins_over_default(self) -> None:
        definitions = [TemplateVariable(name="a", default="d")]

        assert resolve_variables(definitions, {"a": "p"}) == {"a": "p"}

    def test_default_used_when_not_provided(self) -> None:
        definitions = [TemplateVariable(name="a", default="d")]

        assert resolve_variables(definitions) == {"a": "d"}

    def test_none_counts_as_not_provided(self) -> None:
        definitions = [TemplateVariable(name="a", default="d")]

        assert resolve_variables(definitions, {"a": None}) == {"a": "d"}

    def test_falsy_provided_values_are_kept(self) -> None:
        definitions = [
            TemplateVariable(name="a", default="d"),
            TemplateVariable(name="b", default=1),
            TemplateVariable(name="c", default=True),
        ]

        result = resolve_variables(definitions, {"a": "", "b": 0, "c": False})

        assert result == {"a": "", "b": 0, "c": False}

    def test_optional_without_value_is_omitted(self) -> None:
        assert resolve_variables([TemplateVariable(name="a")]) == {}

    def test_required_without_value_raises(self) -> None:
        definitions = [TemplateVariable(name="projectName", required=True)]

        with pytest.raises(MissingRequiredVariableError, match="projectName") as exc_info:
            resolve_variables(definitions, {}, template_id="prd")

        assert exc_info.value.variable == "projectName"
        assert exc_info.value.template_id == "prd"

    def test_required_with_default_is_satisfied(self) -> None:
        definitions = [TemplateVariable(name="a", required=True, default="d")]

        assert resolve_variables(definitions) == {"a": "d"}

    def test_undeclared_values_pass_through(self) -> None:
        definitions = [TemplateVariable(name="a", default=1)]

        assert resolve_variables(definitions, {"z": 26, "b": 2}) == {"a": 1, "z": 26, "b": 2}

    def test_optional_given_none_without_default_is_omitted(self) -> None:
        definitions = [TemplateVariable(name="owner")]

        assert resolve_variables(definitions, {"owner": None, "extra": 1}) == {"extra": 1}

    def test_undeclared_none_passes_through(self) -> None:
        assert resolve_variables([], {"owner": None}) == {"owner": None}

    def test_order_is_declaration_then_caller(self) -> None:
        definitions = [TemplateVariable(name="b"), TemplateVariable(name="a")]

        result = resolve_variables(definitions, {"x": 0, "a": 1, "b": 2})

        assert list(result) == ["b", "a", "x"]

    def test_does_not_mutate_input(self) -> None:
        provided = {"a": None}

        _ = resolve_variables([TemplateVariable(name="a", default=1)], provided)

        assert provided == {"a": None}
