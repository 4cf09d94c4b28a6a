"""
Render syntax nodes as text for a request batch.

Type declarations are summarized (no bodies) so that class-level context stays
small:
- FULL: signature, fields and member method signatures. Used when the type
  itself carries a finding.
- MINIMAL: signature and fields. Used for types synthesized as context for
  flagged members.

Every other kind is returned verbatim because that exact text is what gets
rewritten and spliced back.
"""

from __future__ import annotations

from .models import BlockKind, SummaryLevel
from .syntax_tree import SyntaxNode


def summarize(node: SyntaxNode, level: SummaryLevel = SummaryLevel.FULL) -> str:
    """Summarize ``node`` at ``level``; non-Type nodes ignore the level."""
    if node.kind != BlockKind.TYPE:
        return node.text
    return summarize_type(node, include_methods=level == SummaryLevel.FULL)


def summarize_type(node: SyntaxNode, include_methods: bool) -> str:
    outline = node.outline
    if outline is None:
        signature = node.name or node.kind.value
        return f"{signature} {{\n}}"

    parts = [f"{outline.signature} {{"]
    if outline.fields:
        parts.append("\n  Fields:\n    " + "\n    ".join(outline.fields))
    if include_methods and outline.methods:
        parts.append("\n  Methods:\n    " + "\n    ".join(outline.methods))
    parts.append("\n}")
    return "".join(parts)
