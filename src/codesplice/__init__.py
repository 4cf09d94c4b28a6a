"""Prepare analyzer findings for LLM refactoring and splice the results back.

Pipeline:
    findings = extract_findings(analyzer_output)
    blocks = extract_blocks(path, findings)
    plan = plan_batches(blocks)
    marked = insert_markers(source, blocks)
    ...send format_request_payload(batch) for each batch...
    final = process_marked_file(marked, parse_replacements(response))
    report = build_quality_report(path, source, analyzer_output, final, rerun_output)
"""

from .batch_planner import plan_batches
from .block_locator import locate
from .block_summarizer import summarize
from .exceptions import (BudgetError, CodeSpliceError, InvalidFindingError,
                         InvalidSpanError, SourceParseError)
from .finding_extractor import extract_findings, extract_findings_by_file
from .marker_splice import insert_markers, process_marked_file
from .models import (BatchPlan, BlockKind, CodeBlock, Finding, Replacement,
                     SpanKey, SummaryLevel)
from .objectives import get_instruction, get_refactoring_objective
from .quality_report import (QualityComparison, QualityReport,
                             build_quality_report, compare_findings,
                             summarize_metrics)
from .replacement_parser import parse_replacements
from .request_formatter import format_request_payload, format_user_summary
from .syntax_tree import SyntaxNode, SyntaxTree, TypeOutline, parse_java
from .violation_grouper import extract_blocks, group

__all__ = [
    "BatchPlan",
    "BlockKind",
    "BudgetError",
    "CodeBlock",
    "CodeSpliceError",
    "Finding",
    "InvalidFindingError",
    "InvalidSpanError",
    "QualityComparison",
    "QualityReport",
    "Replacement",
    "SourceParseError",
    "SpanKey",
    "SummaryLevel",
    "SyntaxNode",
    "SyntaxTree",
    "TypeOutline",
    "build_quality_report",
    "compare_findings",
    "extract_blocks",
    "extract_findings",
    "extract_findings_by_file",
    "format_request_payload",
    "format_user_summary",
    "get_instruction",
    "get_refactoring_objective",
    "group",
    "insert_markers",
    "locate",
    "parse_java",
    "parse_replacements",
    "plan_batches",
    "process_marked_file",
    "summarize",
    "summarize_metrics",
]
