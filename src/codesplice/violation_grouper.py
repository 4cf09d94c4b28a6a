"""
Group line-level findings into code blocks.

Findings enclosed by the same minimal node merge into one CodeBlock keyed by
that node's (start, end) span. Every type declaration that does not carry a
finding of its own gets a zero-finding container block with a minimal summary,
so consumers always see class-level context for flagged members.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from .block_locator import locate
from .block_summarizer import summarize
from .exceptions import SourceParseError
from .models import CodeBlock, Finding, SpanKey, SummaryLevel
from .syntax_tree import SyntaxTree, parse_java

logger = logging.getLogger(__name__)

ParseFn = Callable[..., SyntaxTree]


def group(tree: SyntaxTree, findings: Iterable[Finding], file_path: str = "") -> Dict[SpanKey, CodeBlock]:
    """
    Map findings onto their minimal enclosing blocks.

    Args:
        tree: Parsed syntax tree of the file
        findings: Findings for this file, in report order
        file_path: Path recorded on every produced block

    Returns:
        Ordered mapping of span -> CodeBlock. Synthesized container blocks come
        first (document order), then finding-bearing blocks in first-seen order.
    """
    flagged: Dict[SpanKey, CodeBlock] = {}

    for finding in findings:
        node = locate(tree, finding.line)
        if node is None:
            logger.warning(
                f"[ViolationGrouper] No enclosing block found for {finding.rule_id} at line {finding.line}"
            )
            continue

        key = node.span
        block = flagged.get(key)
        if block is not None:
            block.findings.append(finding)
            continue

        flagged[key] = CodeBlock(
            file_path=file_path,
            kind=node.kind,
            start_line=node.start_line,
            end_line=node.end_line,
            text=summarize(node, SummaryLevel.FULL),
            findings=[finding],
            name=node.name,
        )

    grouped: Dict[SpanKey, CodeBlock] = {}
    for type_node in tree.type_declarations():
        key = type_node.span
        if key in flagged or key in grouped:
            continue
        grouped[key] = CodeBlock(
            file_path=file_path,
            kind=type_node.kind,
            start_line=type_node.start_line,
            end_line=type_node.end_line,
            text=summarize(type_node, SummaryLevel.MINIMAL),
            findings=[],
            name=type_node.name,
        )
    grouped.update(flagged)
    return grouped


def extract_blocks(
    file_path: str,
    findings: List[Finding],
    source: Optional[str] = None,
    parse: ParseFn = parse_java,
) -> List[CodeBlock]:
    """
    Extract code blocks for all findings in a file.

    Parse failures and unreadable files degrade to an empty list.

    Args:
        file_path: Path of the analyzed file
        findings: Findings reported for this file
        source: File content; read from ``file_path`` when omitted
        parse: Parser producing a SyntaxTree, ``parse(source, file_path=...)``

    Returns:
        Container blocks first, then finding-bearing blocks
    """
    if not findings:
        return []

    if source is None:
        try:
            source = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"[ViolationGrouper] Could not read {file_path}: {e}")
            return []

    try:
        tree = parse(source, file_path=file_path)
    except SourceParseError as e:
        logger.error(f"[ViolationGrouper] Error parsing {file_path}: {e}")
        return []

    blocks = list(group(tree, findings, file_path=file_path).values())
    logger.info(f"[ViolationGrouper] Extracted {len(blocks)} code blocks from {file_path}")
    return blocks
