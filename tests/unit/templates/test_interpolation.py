from collections.abc import Mapping, Sequence

import pytest

from docweave.exceptions import HelperError
from docweave.templates import HelperRegistry, Interpolator, create_helper_registry


class TestSubstitution:
    def test_replaces_known_variable(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("Hello {{name}}!", {"name": "Ada"}) == "Hello Ada!"

    def test_keeps_unknown_variable_literally(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("Hello {{who}}!", {}) == "Hello {{who}}!"

    def test_tolerates_padding(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{  name }}", {"name": "Ada"}) == "Ada"

    def test_none_renders_empty(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("[{{x}}]", {"x": None}) == "[]"

    def test_booleans_render_lowercase(self, interpolator: Interpolator) -> None:
        text = "{{yes}}/{{no}}"

        assert interpolator.interpolate(text, {"yes": True, "no": False}) == "true/false"

    def test_lists_render_comma_separated(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{tags}}", {"tags": ["a", "b"]}) == "a, b"

    def test_numbers_render_with_str(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{n}} {{f}}", {"n": 3, "f": 2.5}) == "3 2.5"

    def test_text_without_tags_is_returned_unchanged(
        self, interpolator: Interpolator
    ) -> None:
        text = "plain { text }"

        assert interpolator.interpolate(text, {"text": "x"}) is text

    def test_substituted_values_are_not_rescanned(self, interpolator: Interpolator) -> None:
        variables = {"name": "{{other}}", "other": "x"}

        assert interpolator.interpolate("{{name}}", variables) == "{{other}}"

    def test_helper_output_is_not_rescanned(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{uppercase v}}", {"v": "{{x}}", "X": 1}) == "{{X}}"


class TestConditionals:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "yes"),
            (0, "yes"),
            ([], "yes"),
            (True, "yes"),
            ("", "no"),
            (None, "no"),
            (False, "no"),
        ],
    )
    def test_if_else_truthiness(
        self, interpolator: Interpolator, value: object, expected: str
    ) -> None:
        text = "{{#if flag}}yes{{else}}no{{/if}}"

        assert interpolator.interpolate(text, {"flag": value}) == expected

    def test_if_without_else_renders_nothing_when_false(
        self, interpolator: Interpolator
    ) -> None:
        assert interpolator.interpolate("a{{#if flag}}b{{/if}}c", {}) == "ac"

    def test_unless(self, interpolator: Interpolator) -> None:
        text = "{{#unless done}}todo{{else}}done{{/unless}}"

        assert interpolator.interpolate(text, {"done": False}) == "todo"
        assert interpolator.interpolate(text, {"done": True}) == "done"

    def test_nested_conditionals(self, interpolator: Interpolator) -> None:
        text = "{{#if a}}A{{#if b}}B{{else}}-{{/if}}{{/if}}"

        assert interpolator.interpolate(text, {"a": 1, "b": 1}) == "AB"
        assert interpolator.interpolate(text, {"a": 1}) == "A-"
        assert interpolator.interpolate(text, {"b": 1}) == ""

    def test_unclosed_block_is_kept_literally(self, interpolator: Interpolator) -> None:
        text = "{{#if a}}{{name}}"

        assert interpolator.interpolate(text, {"a": True, "name": "x"}) == "{{#if a}}x"


class TestLoops:
    def test_iterates_list_with_this(self, interpolator: Interpolator) -> None:
        text = "{{#each items}}- {{this}}\n{{/each}}"

        assert interpolator.interpolate(text, {"items": ["a", "b"]}) == "- a\n- b\n"

    def test_loop_metadata(self, interpolator: Interpolator) -> None:
        text = "{{#each xs}}{{@index}}{{#if @first}}F{{/if}}{{#if @last}}L{{/if}};{{/each}}"

        assert interpolator.interpolate(text, {"xs": ["a", "b", "c"]}) == "0F;1;2L;"

    def test_record_fields_shadow_outer_variables(self, interpolator: Interpolator) -> None:
        text = "{{#each people}}{{name}} ({{role}}) {{/each}}{{name}}"
        variables = {
            "name": "Outer",
            "people": [{"name": "Ada", "role": "eng"}, {"name": "Bo", "role": "pm"}],
        }

        assert interpolator.interpolate(text, variables) == "Ada (eng) Bo (pm) Outer"

    def test_outer_variables_visible_in_body(self, interpolator: Interpolator) -> None:
        text = "{{#each xs}}{{prefix}}{{this}}{{/each}}"

        assert interpolator.interpolate(text, {"xs": ["a", "b"], "prefix": "-"}) == "-a-b"

    def test_helper_arguments_resolve_in_loop_scope(
        self, interpolator: Interpolator
    ) -> None:
        text = "{{#each xs}}{{uppercase this}}{{/each}}"

        assert interpolator.interpolate(text, {"xs": ["a", "b"]}) == "AB"

    @pytest.mark.parametrize("value", ["text", 3, None, {"a": 1}])
    def test_non_list_renders_nothing(self, interpolator: Interpolator, value: object) -> None:
        assert interpolator.interpolate("[{{#each xs}}x{{/each}}]", {"xs": value}) == "[]"

    def test_missing_list_renders_nothing(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("[{{#each xs}}x{{/each}}]", {}) == "[]"

    def test_nested_loops(self, interpolator: Interpolator) -> None:
        text = "{{#each rows}}{{#each cells}}{{this}}{{/each}}|{{/each}}"
        variables = {"rows": [{"cells": [1, 2]}, {"cells": [3]}]}

        assert interpolator.interpolate(text, variables) == "12|3|"


class TestHelperCalls:
    def test_calls_helper_with_variable(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{uppercase name}}", {"name": "ada"}) == "ADA"

    def test_quoted_literal_argument(self, interpolator: Interpolator) -> None:
        text = '{{join tags " / "}}'

        assert interpolator.interpolate(text, {"tags": ["a", "b"]}) == "a / b"

    def test_number_argument(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{truncate t 3}}", {"t": "abcdef"}) == "abc..."

    def test_sub_expression_argument(self, interpolator: Interpolator) -> None:
        text = "{{truncate (uppercase name) 2}}"

        assert interpolator.interpolate(text, {"name": "ada"}) == "AD..."

    def test_unknown_helper_is_kept_literally(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{shout name}}", {"name": "a"}) == "{{shout name}}"

    def test_unknown_nested_helper_keeps_whole_tag(
        self, interpolator: Interpolator
    ) -> None:
        text = "{{uppercase (shout name)}}"

        assert interpolator.interpolate(text, {"name": "a"}) == text

    def test_bare_helper_name_is_zero_argument_call(
        self, interpolator: Interpolator
    ) -> None:
        assert interpolator.interpolate("{{date}}", {}) == "2024-03-07"

    def test_variable_shadows_helper_name(self, interpolator: Interpolator) -> None:
        assert interpolator.interpolate("{{date}}", {"date": "tomorrow"}) == "tomorrow"

    def test_default_falls_back_for_empty_variable(
        self, interpolator: Interpolator
    ) -> None:
        text = '{{default owner "Unassigned"}}'

        assert interpolator.interpolate(text, {"owner": ""}) == "Unassigned"
        assert interpolator.interpolate(text, {"owner": "Ada"}) == "Ada"

    def test_unresolved_bare_word_passes_through_as_text(
        self, interpolator: Interpolator
    ) -> None:
        assert interpolator.interpolate('{{default owner "x"}}', {}) == "owner"

    def test_helper_receives_scope(self) -> None:
        def scope_size(args: Sequence[object], variables: Mapping[str, object]) -> object:
            return len(variables)

        registry = HelperRegistry()
        registry.register("size", scope_size)
        interpolator = Interpolator(registry)

        assert interpolator.interpolate("{{size}}", {"a": 1, "b": 2}) == "2"

    def test_helper_failure_is_wrapped(self) -> None:
        def boom(args: Sequence[object], variables: Mapping[str, object]) -> object:
            msg = "bad input"
            raise RuntimeError(msg)

        registry = create_helper_registry()
        registry.register("boom", boom)
        interpolator = Interpolator(registry)

        with pytest.raises(HelperError, match="boom") as exc_info:
            interpolator.interpolate("{{boom x}}", {})

        assert exc_info.value.helper == "boom"
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.__cause__ is exc_info.value.cause
