"""Evaluation of parsed interpolation templates.

The evaluator walks the node tree from ``_scanner`` against a scope chain:
the resolved variables at the bottom, one extra layer per ``each``
iteration. Substituted values and helper output are emitted as-is and never
scanned again.
"""

from collections import ChainMap
from collections.abc import Mapping

from docweave.exceptions import HelperError

from ._helpers import HelperRegistry, TemplateHelper
from ._scanner import (
    Argument,
    BlockKind,
    BlockNode,
    CallNode,
    Literal,
    Node,
    ReferenceNode,
    SubExpression,
    TextNode,
    parse_template,
)
from ._values import as_mapping, is_truthy, parse_number_literal, stringify

type Scope = ChainMap[str, object]


class _Unresolved(Exception):  # noqa: N818
    """Internal signal: a nested helper is unknown, keep the tag literal."""


class Interpolator:
    """Applies the interpolation language to strings.

    Example:
        >>> from docweave.templates import create_helper_registry
        >>> interpolator = Interpolator(create_helper_registry())
        >>> interpolator.interpolate("Hello {{uppercase name}}", {"name": "ada"})
        'Hello ADA'
    """

    __slots__ = ("_helpers",)

    def __init__(self, helpers: HelperRegistry) -> None:
        self._helpers: HelperRegistry = helpers

    @property
    def helpers(self) -> HelperRegistry:
        return self._helpers

    def interpolate(self, text: str, variables: Mapping[str, object]) -> str:
        """Substitute variables, expand blocks and call helpers in ``text``.

        References to names that are neither in scope nor registered helpers
        are left exactly as written.

        Raises:
            HelperError: If a helper raises while being invoked.
        """
        if "{{" not in text:
            return text
        output: list[str] = []
        self._render(parse_template(text), ChainMap(dict(variables)), output)
        return "".join(output)

    def _render(self, nodes: tuple[Node, ...], scope: Scope, output: list[str]) -> None:
        for node in nodes:
            match node:
                case TextNode(text=text):
                    output.append(text)
                case ReferenceNode():
                    output.append(self._reference(node, scope))
                case CallNode():
                    output.append(self._call(node, scope))
                case BlockNode(kind=BlockKind.EACH):
                    self._each(node, scope, output)
                case BlockNode():
                    passed = is_truthy(scope.get(node.variable))
                    if node.kind is BlockKind.UNLESS:
                        passed = not passed
                    self._render(node.body if passed else node.alternate, scope, output)

    def _reference(self, node: ReferenceNode, scope: Scope) -> str:
        if node.name in scope:
            return stringify(scope[node.name])
        helper = self._helpers.get(node.name)
        if helper is None:
            return node.source
        return stringify(self._invoke(node.name, helper, [], scope))

    def _call(self, node: CallNode, scope: Scope) -> str:
        helper = self._helpers.get(node.name)
        if helper is None:
            return node.source
        try:
            args = [self._argument(arg, scope) for arg in node.args]
        except _Unresolved:
            return node.source
        return stringify(self._invoke(node.name, helper, args, scope))

    def _argument(self, arg: Argument, scope: Scope) -> object:
        """Resolve one argument: variable, quoted literal, number, raw token."""
        match arg:
            case Literal(value=value):
                return value
            case SubExpression(name=name, args=sub_args):
                helper = self._helpers.get(name)
                if helper is None:
                    raise _Unresolved(name)
                values = [self._argument(sub_arg, scope) for sub_arg in sub_args]
                return self._invoke(name, helper, values, scope)
            case _:
                if arg.text in scope:
                    return scope[arg.text]
                number = parse_number_literal(arg.text)
                return number if number is not None else arg.text

    def _each(self, node: BlockNode, scope: Scope, output: list[str]) -> None:
        items = scope.get(node.variable)
        if not isinstance(items, list | tuple):
            return
        last = len(items) - 1
        for index, item in enumerate(items):
            layer: dict[str, object] = {}
            record = as_mapping(item)
            if record is not None:
                layer.update({str(key): value for key, value in record.items()})
            layer.update(
                {"this": item, "@index": index, "@first": index == 0, "@last": index == last}
            )
            self._render(node.body, scope.new_child(layer), output)

    def _invoke(
        self,
        name: str,
        helper: TemplateHelper,
        args: list[object],
        scope: Scope,
    ) -> object:
        try:
            return helper(args, scope)
        except Exception as e:
            msg = f"Helper {name!r} failed: {e}"
            raise HelperError(msg, helper=name, cause=e) from e
