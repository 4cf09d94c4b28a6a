"""Find the smallest syntax block enclosing a source line."""

from __future__ import annotations

from typing import Optional

from .models import BlockKind
from .syntax_tree import SyntaxNode, SyntaxTree

CANDIDATE_KINDS = frozenset(
    {BlockKind.METHOD, BlockKind.TYPE, BlockKind.LAMBDA, BlockKind.STATIC_INITIALIZER}
)

# Equal spans: the more specific kind wins
_KIND_PRIORITY = {
    BlockKind.METHOD: 0,
    BlockKind.LAMBDA: 1,
    BlockKind.STATIC_INITIALIZER: 2,
    BlockKind.TYPE: 3,
    BlockKind.UNKNOWN: 4,
}


def _rank(node: SyntaxNode):
    return (node.end_line - node.start_line, _KIND_PRIORITY[node.kind])


def locate(tree: SyntaxTree, line: int) -> Optional[SyntaxNode]:
    """
    Return the candidate node with the smallest span containing ``line``.

    Only Method, Type, Lambda and StaticInitializer nodes are candidates.
    Ties on span length are broken by kind (Method > Lambda >
    StaticInitializer > Type), then by first visit in document order.

    Args:
        tree: Parsed syntax tree
        line: 1-based line number

    Returns:
        The minimal enclosing node, or None when no candidate contains the line
    """
    best: Optional[SyntaxNode] = None
    for node in tree.walk():
        if node.kind not in CANDIDATE_KINDS:
            continue
        if not node.start_line <= line <= node.end_line:
            continue
        if best is None or _rank(node) < _rank(best):
            best = node
    return best
