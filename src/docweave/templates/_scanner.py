"""Scanner and parser for the ``{{ ... }}`` interpolation language.

Text is split into literal runs and tags. Tags are classified by shape:

- ``{{name}}``: variable reference (or zero-argument helper call)
- ``{{name arg ...}}``: helper call; arguments may be quoted literals,
  bare words or parenthesized sub-expressions ``(helper arg ...)``
- ``{{#if v}}``, ``{{#unless v}}``, ``{{#each v}}``: block openers
- ``{{else}}`` and ``{{/if}}``, ``{{/unless}}``, ``{{/each}}``: block markers

Anything that does not fit a shape, and any block that is never closed, is
kept as literal text so the output shows exactly what was written.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum
from functools import lru_cache

_OPEN_PATTERN = re.compile(r"^#(if|unless|each)\s+(@?\w+)$")
_CLOSE_PATTERN = re.compile(r"^/(if|unless|each)$")
_IDENTIFIER_PATTERN = re.compile(r"^@?\w+$")
_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
_TOKEN_PATTERN = re.compile(
    r"""
    \s*
    (?:
        "(?P<double>(?:[^"\\]|\\.)*)"
      | '(?P<single>(?:[^'\\]|\\.)*)'
      | (?P<open>\()
      | (?P<close>\))
      | (?P<word>[^\s()"']+)
    )
    """,
    re.VERBOSE | re.DOTALL,
)


class BlockKind(StrEnum):
    """Block tag kinds."""

    IF = "if"
    UNLESS = "unless"
    EACH = "each"


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Word:
    """Unquoted helper argument: a variable name, number or raw token."""

    text: str


@dataclass(frozen=True, slots=True)
class Literal:
    """Quoted helper argument."""

    value: str


@dataclass(frozen=True, slots=True)
class SubExpression:
    """Parenthesized helper call used as an argument."""

    name: str
    args: "tuple[Argument, ...]"


type Argument = Word | Literal | SubExpression


@dataclass(frozen=True, slots=True)
class TextNode:
    """Literal text copied to the output."""

    text: str


@dataclass(frozen=True, slots=True)
class ReferenceNode:
    """``{{name}}``."""

    name: str
    source: str


@dataclass(frozen=True, slots=True)
class CallNode:
    """``{{helper arg ...}}``."""

    name: str
    args: "tuple[Argument, ...]"
    source: str


@dataclass(frozen=True, slots=True)
class BlockNode:
    """A closed ``if``/``unless``/``each`` block.

    Attributes:
        kind: Block kind.
        variable: Name the block tests or iterates.
        body: Nodes rendered when the test passes (or per element).
        alternate: Nodes after ``{{else}}``.
    """

    kind: BlockKind
    variable: str
    body: "tuple[Node, ...]"
    alternate: "tuple[Node, ...]" = ()


type Node = TextNode | ReferenceNode | CallNode | BlockNode


# =============================================================================
# Scanning
# =============================================================================


@dataclass(frozen=True, slots=True)
class RawTag:
    """A ``{{ ... }}`` span as written plus its trimmed inner text."""

    source: str
    inner: str


def _find_tag_end(text: str, start: int) -> int:
    """Index of the ``}}`` closing a tag, skipping quoted strings."""
    quote: str | None = None
    index = start
    length = len(text)
    while index < length:
        char = text[index]
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "}" and text.startswith("}}", index):
            return index
        index += 1
    # An unbalanced quote: fall back to the first closing braces
    return text.find("}}", start)


def scan(text: str) -> list[str | RawTag]:
    """Split text into literal runs and raw tags.

    Example:
        >>> scan("Hi {{name}}!")
        ['Hi ', RawTag(source='{{name}}', inner='name'), '!']
    """
    pieces: list[str | RawTag] = []
    position = 0
    while position < len(text):
        opening = text.find("{{", position)
        if opening == -1:
            break
        closing = _find_tag_end(text, opening + 2)
        if closing == -1:
            break
        # "{{ {{name}}" and "{{{name}}}": the tag starts at the innermost "{{"
        innermost = text.rfind("{{", opening + 1, closing)
        if innermost != -1:
            opening = innermost
            closing = _find_tag_end(text, opening + 2)
        if opening > position:
            pieces.append(text[position:opening])
        pieces.append(
            RawTag(
                source=text[opening : closing + 2],
                inner=text[opening + 2 : closing].strip(),
            )
        )
        position = closing + 2
    if position < len(text):
        pieces.append(text[position:])
    return pieces


# =============================================================================
# Expression Parsing
# =============================================================================


def _tokenize(inner: str) -> list[tuple[str, str]] | None:
    """Split an expression into (kind, value) tokens; None when malformed."""
    tokens: list[tuple[str, str]] = []
    position = 0
    while position < len(inner) and not inner[position:].isspace():
        match = _TOKEN_PATTERN.match(inner, position)
        if match is None:
            return None
        kind = match.lastgroup
        if kind in ("double", "single"):
            raw = match.group(kind)
            tokens.append(("literal", _ESCAPE_PATTERN.sub(r"\1", raw)))
        elif kind is not None:
            tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


def _parse_call(
    tokens: list[tuple[str, str]],
    index: int,
    *,
    nested: bool,
) -> tuple[str, tuple[Argument, ...], int] | None:
    """Parse ``name arg ...`` starting at ``index``.

    Returns the helper name, its arguments and the index after the call
    (past the closing parenthesis when ``nested``).
    """
    if index >= len(tokens):
        return None
    kind, name = tokens[index]
    if kind != "word" or not _IDENTIFIER_PATTERN.match(name):
        return None

    args: list[Argument] = []
    index += 1
    while index < len(tokens):
        kind, value = tokens[index]
        if kind == "close":
            if not nested:
                return None
            return name, tuple(args), index + 1
        if kind == "open":
            parsed = _parse_call(tokens, index + 1, nested=True)
            if parsed is None:
                return None
            sub_name, sub_args, index = parsed
            args.append(SubExpression(name=sub_name, args=sub_args))
            continue
        args.append(Literal(value) if kind == "literal" else Word(value))
        index += 1

    if nested:
        return None
    return name, tuple(args), index


def parse_expression(tag: RawTag) -> ReferenceNode | CallNode | None:
    """Parse a non-block tag into a reference or helper call."""
    tokens = _tokenize(tag.inner)
    if not tokens:
        return None
    parsed = _parse_call(tokens, 0, nested=False)
    if parsed is None:
        return None
    name, args, _ = parsed
    if not args:
        return ReferenceNode(name=name, source=tag.source)
    return CallNode(name=name, args=args, source=tag.source)


# =============================================================================
# Tree Building
# =============================================================================


@dataclass(slots=True)
class _Frame:
    """An open block awaiting its closing tag."""

    kind: BlockKind
    variable: str
    source: str
    body: list[Node] = field(default_factory=list)
    alternate: list[Node] | None = None
    else_source: str = ""

    @property
    def target(self) -> list[Node]:
        return self.alternate if self.alternate is not None else self.body

    def close(self) -> BlockNode:
        return BlockNode(
            kind=self.kind,
            variable=self.variable,
            body=tuple(self.body),
            alternate=tuple(self.alternate or ()),
        )

    def flatten(self) -> list[Node]:
        """Render an unclosed block back into literal text plus its children."""
        nodes: list[Node] = [TextNode(self.source), *self.body]
        if self.alternate is not None:
            nodes.append(TextNode(self.else_source))
            nodes.extend(self.alternate)
        return nodes


@lru_cache(maxsize=1024)
def parse_template(text: str) -> tuple[Node, ...]:
    """Parse interpolation source into a node tree.

    Results are cached; the returned tree is immutable.

    Example:
        >>> parse_template("{{#if a}}x{{/if}}")
        (BlockNode(kind=<BlockKind.IF: 'if'>, variable='a', body=(TextNode(text='x'),), alternate=()),)
    """
    root: list[Node] = []
    stack: list[_Frame] = []

    def target() -> list[Node]:
        return stack[-1].target if stack else root

    for piece in scan(text):
        if isinstance(piece, str):
            target().append(TextNode(piece))
            continue

        opener = _OPEN_PATTERN.match(piece.inner)
        if opener is not None:
            stack.append(
                _Frame(
                    kind=BlockKind(opener.group(1)),
                    variable=opener.group(2),
                    source=piece.source,
                )
            )
            continue

        if piece.inner == "else":
            frame = stack[-1] if stack else None
            if (
                frame is not None
                and frame.kind is not BlockKind.EACH
                and frame.alternate is None
            ):
                frame.alternate = []
                frame.else_source = piece.source
            else:
                target().append(TextNode(piece.source))
            continue

        closer = _CLOSE_PATTERN.match(piece.inner)
        if closer is not None:
            kind = BlockKind(closer.group(1))
            if not any(frame.kind is kind for frame in stack):
                target().append(TextNode(piece.source))
                continue
            # Unclosed inner blocks become literal text inside the closed one
            while stack[-1].kind is not kind:
                unclosed = stack.pop()
                target().extend(unclosed.flatten())
            finished = stack.pop()
            target().append(finished.close())
            continue

        expression = parse_expression(piece)
        target().append(expression if expression is not None else TextNode(piece.source))

    while stack:
        unclosed = stack.pop()
        target().extend(unclosed.flatten())

    return tuple(root)
