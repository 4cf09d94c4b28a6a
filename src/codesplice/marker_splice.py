"""Marker splice engine

Phase A (before dispatch) wraps every flagged block of the original file in a
pair of sentinel comment lines. Phase B (after the response arrives) swaps each
marked region for the rewritten implementation with the same entity name, or
for a removal notice when the response has none.

Sentinels look like::

    // <start-flagged:foo-1>
    ...original block...
    // <end-flagged:foo-1>

and ids are ``{entityName}-{sequence}``, unique within one insert run.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .models import BlockKind, CodeBlock

logger = logging.getLogger(__name__)

START_FLAGGED = "// <start-flagged:{}>"
END_FLAGGED = "// <end-flagged:{}>"
START_REPLACED = "// <start-replaced:{}>"
END_REPLACED = "// <end-replaced:{}>"

MARKER_PAIR_PATTERN = re.compile(r"// <start-flagged:([^>]+)>(.*?)// <end-flagged:\1>", re.DOTALL)

# Optional inline annotations, declaration tokens (modifiers, type), then the name and "("
METHOD_NAME_PATTERN = re.compile(
    r"^[ \t]*(?:@[\w$.]+(?:\([^)\n]*\))?[ \t]+)*(?:[\w$<>\[\],.?]+[ \t]+)+([A-Za-z_$][\w$]*)[ \t]*\(",
    re.MULTILINE,
)
CALL_NAME_PATTERN = re.compile(r"([A-Za-z_$][\w$]*)\s*\(")
TYPE_NAME_PATTERN = re.compile(r"\b(?:class|interface|enum|record)\s+([A-Za-z_$][\w$]*)")

_KIND_NAMES = frozenset(kind.value for kind in BlockKind)


def extract_entity_name(block: CodeBlock) -> str:
    """
    Best-effort name of the entity a block declares.

    The name recorded from the syntax tree wins. Otherwise Method blocks use
    the identifier before the declaration's ``(`` and Type blocks the
    identifier after ``class``. Falls back to the block kind.
    """
    if block.name:
        return block.name

    text = block.text
    if not text:
        return block.kind.value

    if block.kind == BlockKind.METHOD:
        match = METHOD_NAME_PATTERN.search(text) or CALL_NAME_PATTERN.search(text)
        if match:
            return match.group(1)
    elif block.kind == BlockKind.TYPE:
        match = TYPE_NAME_PATTERN.search(text)
        if match:
            return match.group(1)

    return block.kind.value


def enclosed_name(region: str, marker_id: Optional[str] = None) -> Optional[str]:
    """
    Name of the entity between a marker pair.

    The id's entity part is used when the region mentions it, since Phase A
    took it from the syntax tree. Otherwise the first type or method
    declaration in the region names it.
    """
    entity = marker_id.rsplit("-", 1)[0] if marker_id else None
    if entity in _KIND_NAMES:
        # Unnamed block (lambda, initializer): calls in its body are not its name
        return entity
    if entity and re.search(rf"(?<![\w$]){re.escape(entity)}(?![\w$])", region):
        return entity

    matches = [m for m in (TYPE_NAME_PATTERN.search(region), METHOD_NAME_PATTERN.search(region)) if m]
    if matches:
        return min(matches, key=lambda m: m.start()).group(1)
    return entity


def _markable(blocks: Iterable[CodeBlock], line_count: int) -> List[CodeBlock]:
    flagged: Dict[Tuple[int, int], CodeBlock] = {}
    for block in blocks:
        if not block.has_findings:
            continue
        if block.end_line > line_count:
            logger.warning(
                f"[MarkerSplice] Block {block.start_line}-{block.end_line} is outside the file "
                f"({line_count} lines); not marked"
            )
            continue
        flagged.setdefault((block.start_line, block.end_line), block)

    # A rewritten method or lambda replaces everything nested inside it
    outer = [
        block
        for block in flagged.values()
        if not any(
            other is not block and not other.is_container and other.span.contains(block.span)
            for other in flagged.values()
        )
    ]
    for block in flagged.values():
        if block not in outer:
            logger.debug(
                f"[MarkerSplice] Not marking {block.kind.value} block {block.start_line}-{block.end_line}: "
                f"covered by an enclosing flagged block"
            )

    markable = []
    for block in outer:
        # Markers around a Type would swallow its members' pairs
        if block.is_container and any(
            other is not block and block.span.contains(other.span) for other in outer
        ):
            logger.debug(
                f"[MarkerSplice] Not marking Type block {block.start_line}-{block.end_line}: "
                f"it encloses other flagged blocks"
            )
            continue
        markable.append(block)
    return markable


def insert_markers(original_text: str, blocks: List[CodeBlock]) -> str:
    """
    Insert start/end sentinel lines around every finding-bearing block.

    Blocks are processed bottom-up so earlier insertions never shift the line
    numbers of blocks still to be marked.

    Args:
        original_text: The file content as analyzed
        blocks: Blocks from extract_blocks; zero-finding containers are ignored

    Returns:
        The file content with sentinel lines inserted
    """
    if not original_text or not blocks:
        return original_text

    lines = original_text.split("\n")
    ordered = sorted(
        _markable(blocks, len(lines)), key=lambda b: (b.start_line, b.end_line), reverse=True
    )

    for sequence, block in enumerate(ordered, start=1):
        marker_id = f"{extract_entity_name(block)}-{sequence}"
        lines.insert(block.end_line, END_FLAGGED.format(marker_id))
        lines.insert(block.start_line - 1, START_FLAGGED.format(marker_id))
        logger.debug(f"[MarkerSplice] Marked lines {block.start_line}-{block.end_line} as {marker_id}")

    return "\n".join(lines)


def _removal_notice(name: Optional[str], marker_id: str, reason: str) -> str:
    return f"// <removed-method: {name} from marker {marker_id}>\n// Original method was removed as {reason}"


def replace_marked_blocks(marked_text: str, replacements: Dict[str, str]) -> Tuple[str, Set[str]]:
    """
    Replace every marker pair in one forward pass.

    Match positions come from the unmodified text, so each one is shifted by
    the accumulated length difference of the replacements made before it.

    Returns:
        (content, names of replacements that were spliced in)
    """
    buffer = marked_text
    used: Set[str] = set()
    offset = 0

    for match in MARKER_PAIR_PATTERN.finditer(marked_text):
        marker_id = match.group(1)
        name = enclosed_name(match.group(2), marker_id)

        if name in replacements and name not in used:
            replacement = "\n".join(
                [START_REPLACED.format(marker_id), replacements[name], END_REPLACED.format(marker_id)]
            )
            used.add(name)
            logger.debug(f"[MarkerSplice] Replaced marked block {marker_id} containing '{name}'")
        elif name in used:
            replacement = _removal_notice(name, marker_id, "its refactored implementation was placed at an earlier marker")
            logger.warning(f"[MarkerSplice] '{name}' already spliced; marker block {marker_id} removed")
        else:
            replacement = _removal_notice(name, marker_id, "no matching refactored implementation was found")
            logger.warning(f"[MarkerSplice] No replacement found for '{name}' in marker block {marker_id}. Method removed.")

        start = match.start() + offset
        end = match.end() + offset
        buffer = buffer[:start] + replacement + buffer[end:]
        offset += len(replacement) - (match.end() - match.start())

    return buffer, used


def append_extra_methods(content: str, replacements: Dict[str, str], used: Set[str]) -> str:
    """Insert replacements that matched no marker before the file's last ``}``."""
    extras = [(name, text) for name, text in replacements.items() if name not in used]
    if not extras:
        return content

    snippet = "".join(
        f"\n\n    // Additional helper method generated by LLM: {name}\n    {text}" for name, text in extras
    )

    brace = content.rfind("}")
    if brace < 0:
        logger.warning(f"[MarkerSplice] No closing brace found; appending {len(extras)} extra method(s) at end of file")
        return content + snippet + "\n"

    logger.info(f"[MarkerSplice] Added {len(extras)} extra helper method(s) from LLM response")
    return content[:brace] + snippet + "\n" + content[brace:]


def process_marked_file(marked_text: str, replacements: Optional[Dict[str, str]]) -> str:
    """
    Resolve all marker pairs in ``marked_text`` and append unused replacements.

    Args:
        marked_text: Output of insert_markers
        replacements: Map of entity name -> rewritten implementation text

    Returns:
        Final file content with no ``start-flagged``/``end-flagged`` pairs left
    """
    if not marked_text:
        logger.warning("[MarkerSplice] Attempted to process null or empty file content")
        return marked_text

    replacements = replacements or {}
    content, used = replace_marked_blocks(marked_text, replacements)
    return append_extra_methods(content, replacements, used)
