"""Format extracted blocks for the generation service and for people.

- ``format_request_payload``: JSON document for one batch.
- ``format_user_summary``: plain-text report of findings per type.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import CodeBlock
from .objectives import ObjectiveTable, get_instruction, get_refactoring_objective

logger = logging.getLogger(__name__)

UNKNOWN_CONTAINER = "Unknown"


def _file_name(blocks: List[CodeBlock]) -> str:
    return Path(blocks[0].file_path).name if blocks[0].file_path else ""


def _owner_index(block: CodeBlock, containers: List[CodeBlock]) -> Optional[int]:
    best = None
    for i, container in enumerate(containers):
        if container.start_line <= block.start_line <= container.end_line:
            if best is None or container.span.length < containers[best].span.length:
                best = i
    return best


def _issues(block: CodeBlock, table: Optional[ObjectiveTable]) -> Dict[str, Any]:
    return {
        "issues": [{"rule": f.rule_id, "message": f.message} for f in block.findings],
        "refactoring_objective": get_refactoring_objective([f.rule_id for f in block.findings], table=table),
    }


def format_request_payload(
    blocks: List[CodeBlock], include_issues: bool = True, table: Optional[ObjectiveTable] = None
) -> str:
    """
    Build the JSON request body for one batch.

    Args:
        blocks: One batch from plan_batches (containers followed by members)
        include_issues: Attach findings and a refactoring objective per block
        table: Objective table (defaults to the configured one)

    Returns:
        JSON string; ``"[]"`` for an empty batch
    """
    if not blocks:
        return "[]"

    containers = [b for b in blocks if b.is_container]
    classes: List[Dict[str, Any]] = []
    for container in containers:
        entry: Dict[str, Any] = {"type_signature": container.text, "violations": []}
        if include_issues and container.has_findings:
            entry.update(_issues(container, table))
        classes.append(entry)
    unknown: Dict[str, Any] = {"type_signature": UNKNOWN_CONTAINER, "violations": []}

    for block in blocks:
        if block.is_container:
            continue
        violation: Dict[str, Any] = {"block_type": block.kind.value, "extracted_code": block.text}
        if include_issues:
            violation.update(_issues(block, table))
        index = _owner_index(block, containers)
        target = unknown if index is None else classes[index]
        target["violations"].append(violation)

    if unknown["violations"]:
        classes.append(unknown)

    payload = {
        "instruction": get_instruction(table),
        "file": _file_name(blocks),
        "classes": classes,
    }
    logger.info(f"[RequestFormatter] Generated request payload for file: {payload['file']}")
    return json.dumps(payload, indent=2)


def format_user_summary(blocks: List[CodeBlock]) -> str:
    """Human-readable findings report grouped by type declaration."""
    if not blocks:
        return "No violations detected in the analyzed file."

    file_name = _file_name(blocks)
    lines = [f"Analysis Summary for file: {file_name}"]

    types = sorted((b for b in blocks if b.is_container), key=lambda b: b.start_line)
    members = [b for b in blocks if not b.is_container]

    for type_block in types:
        signature = type_block.text.split("\n", 1)[0].rstrip(" {")
        lines.append("")
        lines.append(f"Type Signature: {signature} (Lines {type_block.start_line}-{type_block.end_line})")
        for finding in type_block.findings:
            lines.append(f"    - {finding.rule_id}: {finding.message}")

        owned = [m for m in members if type_block.span.contains(m.span)]
        if not owned and not type_block.findings:
            lines.append("  No violations detected in this type.")
        for member in owned:
            lines.append("")
            lines.append(f"  {member.kind.value} (Lines {member.start_line}-{member.end_line})")
            for finding in member.findings:
                lines.append(f"    - {finding.rule_id}: {finding.message}")

    logger.info(f"[RequestFormatter] Generated analysis summary for file: {file_name}")
    return "\n".join(lines) + "\n"
