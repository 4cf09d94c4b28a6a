"""
Parser-neutral syntax tree plus the Java adapter that builds it.

The locator, summarizer and grouper only ever see ``SyntaxNode`` values, so
they can be exercised with hand-built trees. ``parse_java`` produces those
trees from a tree-sitter parse.

Mapping from tree-sitter Java node types:
- class / interface / enum / record / annotation declarations -> Type
- method / constructor declarations -> Method
- lambda expressions -> Lambda
- static and instance initializer blocks -> StaticInitializer

Everything else is transparent: candidate descendants hang off the nearest
candidate ancestor, and the root is an Unknown node spanning the whole file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from .exceptions import SourceParseError
from .models import BlockKind, SpanKey

logger = logging.getLogger(__name__)

_NODE_KINDS = {
    "class_declaration": BlockKind.TYPE,
    "interface_declaration": BlockKind.TYPE,
    "enum_declaration": BlockKind.TYPE,
    "record_declaration": BlockKind.TYPE,
    "annotation_type_declaration": BlockKind.TYPE,
    "method_declaration": BlockKind.METHOD,
    "constructor_declaration": BlockKind.METHOD,
    "compact_constructor_declaration": BlockKind.METHOD,
    "lambda_expression": BlockKind.LAMBDA,
    "static_initializer": BlockKind.STATIC_INITIALIZER,
}

# A bare block directly inside a type body is an instance initializer
_INITIALIZER_PARENTS = {"class_body", "enum_body_declarations"}

_FIELD_TYPES = {"field_declaration", "constant_declaration"}
_METHOD_TYPES = {"method_declaration", "constructor_declaration", "compact_constructor_declaration"}


@dataclass
class TypeOutline:
    """Structural facts about a type declaration used for summaries"""

    signature: str
    fields: List[str] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)


@dataclass
class SyntaxNode:
    """A node of one of the block kinds, with its candidate descendants."""

    kind: BlockKind
    start_line: int
    end_line: int
    text: str = ""
    name: Optional[str] = None
    outline: Optional[TypeOutline] = None
    children: List["SyntaxNode"] = field(default_factory=list)

    @property
    def span(self) -> SpanKey:
        return SpanKey(self.start_line, self.end_line)

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal, document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class SyntaxTree:
    root: SyntaxNode
    source: str = ""

    def walk(self) -> Iterator[SyntaxNode]:
        return self.root.walk()

    def type_declarations(self) -> List[SyntaxNode]:
        """All Type nodes in discovery order."""
        return [node for node in self.walk() if node.kind == BlockKind.TYPE]


def _collapse(text: str) -> str:
    return " ".join(text.split())


class JavaTreeBuilder:
    """Builds SyntaxTree values from Java source using tree-sitter."""

    def __init__(self):
        self._parser: Optional[Parser] = None

    @property
    def parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser("java")
        return self._parser

    def build(self, source: str, file_path: Optional[str] = None) -> SyntaxTree:
        """
        Parse Java source into a SyntaxTree.

        Args:
            source: Java source text
            file_path: Optional path, used in error messages only

        Returns:
            SyntaxTree rooted at an Unknown node spanning the file

        Raises:
            SourceParseError: if the source contains syntax errors
        """
        data = source.encode("utf-8")
        ts_tree = self.parser.parse(data)
        ts_root = ts_tree.root_node
        if ts_root.has_error:
            raise SourceParseError(
                f"Syntax errors in {file_path or '<source>'}", file_path=file_path
            )

        line_count = max(1, source.count("\n") + 1)
        root = SyntaxNode(kind=BlockKind.UNKNOWN, start_line=1, end_line=line_count, text=source)

        # Explicit stack: expression chains can nest deeper than the recursion limit
        stack: List[Tuple[Node, SyntaxNode]] = [(child, root) for child in reversed(ts_root.named_children)]
        while stack:
            ts_node, parent = stack.pop()
            kind = self._kind_for(ts_node)
            owner = parent
            if kind is not None:
                owner = self._make_node(ts_node, kind, data)
                parent.children.append(owner)
            stack.extend((child, owner) for child in reversed(ts_node.named_children))

        return SyntaxTree(root=root, source=source)

    @staticmethod
    def _kind_for(ts_node: Node) -> Optional[BlockKind]:
        kind = _NODE_KINDS.get(ts_node.type)
        if kind is not None:
            return kind
        if ts_node.type == "block" and ts_node.parent is not None:
            if ts_node.parent.type in _INITIALIZER_PARENTS:
                return BlockKind.STATIC_INITIALIZER
        return None

    def _make_node(self, ts_node: Node, kind: BlockKind, data: bytes) -> SyntaxNode:
        name_node = ts_node.child_by_field_name("name")
        node = SyntaxNode(
            kind=kind,
            start_line=ts_node.start_point[0] + 1,
            end_line=ts_node.end_point[0] + 1,
            text=self._slice(data, ts_node.start_byte, ts_node.end_byte),
            name=self._slice(data, name_node.start_byte, name_node.end_byte) if name_node else None,
        )
        if kind == BlockKind.TYPE:
            node.outline = self._outline(ts_node, data)
        return node

    @staticmethod
    def _slice(data: bytes, start: int, end: int) -> str:
        return data[start:end].decode("utf-8", errors="replace")

    def _header(self, ts_node: Node, data: bytes) -> str:
        """Declaration text up to (not including) its body."""
        body = ts_node.child_by_field_name("body")
        if body is None:
            return _collapse(self._slice(data, ts_node.start_byte, ts_node.end_byte)).rstrip(";").rstrip()
        return _collapse(self._slice(data, ts_node.start_byte, body.start_byte))

    def _outline(self, ts_node: Node, data: bytes) -> TypeOutline:
        outline = TypeOutline(signature=self._header(ts_node, data))
        body = ts_node.child_by_field_name("body")
        if body is None:
            return outline

        members = list(body.named_children)
        for member in body.named_children:
            if member.type == "enum_body_declarations":
                members.extend(member.named_children)

        for member in members:
            if member.type in _FIELD_TYPES:
                type_node = member.child_by_field_name("type")
                names = []
                for declarator in member.children_by_field_name("declarator"):
                    name_node = declarator.child_by_field_name("name")
                    if name_node is not None:
                        names.append(self._slice(data, name_node.start_byte, name_node.end_byte))
                type_text = self._slice(data, type_node.start_byte, type_node.end_byte) if type_node else ""
                outline.fields.append(_collapse(f"{type_text} {', '.join(names)}"))
            elif member.type in _METHOD_TYPES:
                outline.methods.append(self._header(member, data))
        return outline


_default_builder = JavaTreeBuilder()


def parse_java(source: str, file_path: Optional[str] = None) -> SyntaxTree:
    """Parse Java source with the shared tree builder."""
    return _default_builder.build(source, file_path=file_path)
