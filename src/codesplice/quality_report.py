"""
Before/after quality comparison for a refactored file.

The analyzer is run by the caller on both the original and the spliced file;
this module turns the two outputs into:
- a comparison of finding counts with a verdict message,
- the per-type user summaries of both runs,
- per-rule metric statistics read back from a user summary.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .finding_extractor import extract_findings
from .models import Finding
from .request_formatter import format_user_summary
from .violation_grouper import extract_blocks

logger = logging.getLogger(__name__)

# "    - CyclomaticComplexity: The method 'x' has a cyclomatic complexity of 12."
METRIC_PATTERN = re.compile(r"- (\w+): .*? has .*? (\d+)")

TOTAL_METHODS_KEY = "Total Methods"


@dataclass
class QualityComparison:
    """Finding counts of the original and processed file."""

    original_count: int
    processed_count: int
    message: str

    @property
    def delta(self) -> int:
        """Positive when findings were removed."""
        return self.original_count - self.processed_count

    @property
    def issues_fixed(self) -> bool:
        return self.processed_count < self.original_count


@dataclass
class QualityReport:
    file_name: str
    original_summary: str
    processed_summary: str
    comparison: QualityComparison
    original_metrics: Dict[str, str] = field(default_factory=dict)
    processed_metrics: Dict[str, str] = field(default_factory=dict)


def compare_findings(original: List[Finding], processed: List[Finding]) -> QualityComparison:
    """
    Compare analyzer findings before and after refactoring.

    Args:
        original: Findings for the file as analyzed
        processed: Findings for the file after splicing

    Returns:
        QualityComparison with both counts and a verdict message
    """
    original_count = len(original)
    processed_count = len(processed)
    logger.info(f"[QualityReport] Original violations: {original_count}")
    logger.info(f"[QualityReport] Processed violations: {processed_count}")

    if processed_count < original_count:
        message = f"LLM response fixed {original_count - processed_count} issue(s)!"
        logger.info(f"[QualityReport] {message}")
    elif processed_count == original_count:
        message = "LLM response didn't affect analyzer issues."
        logger.info(f"[QualityReport] {message}")
    else:
        message = f"LLM response introduced {processed_count - original_count} new issue(s)!"
        logger.warning(f"[QualityReport] {message}")

    return QualityComparison(original_count=original_count, processed_count=processed_count, message=message)


def extract_metrics(summary_text: str) -> Dict[str, List[int]]:
    """Collect the numeric value of every ``- <rule>: ... has ... <n>`` line, per rule."""
    metrics: Dict[str, List[int]] = {}
    for match in METRIC_PATTERN.finditer(summary_text or ""):
        metrics.setdefault(match.group(1), []).append(int(match.group(2)))
    return metrics


def summarize_metrics(summary_text: str) -> Dict[str, str]:
    """
    Average and maximum per rule, plus the number of measured methods.

    Returns:
        Mapping of rule id -> ``"Average: <avg>, Max: <max>"`` with a final
        ``"Total Methods"`` entry (the longest value list)
    """
    metrics = extract_metrics(summary_text)
    summary: Dict[str, str] = {}
    for rule_id, values in metrics.items():
        average = sum(values) / len(values)
        summary[rule_id] = f"Average: {average:.2f}, Max: {max(values)}"
    summary[TOTAL_METHODS_KEY] = str(max((len(values) for values in metrics.values()), default=0))
    return summary


def build_quality_report(
    file_path: str,
    original_source: str,
    original_output: str,
    processed_source: str,
    processed_output: str,
) -> QualityReport:
    """
    Summarize and compare analyzer runs on the original and processed source.

    Args:
        file_path: Path of the analyzed file
        original_source: File content before refactoring
        original_output: Analyzer output for original_source
        processed_source: File content after splicing
        processed_output: Analyzer output for processed_source

    Returns:
        QualityReport with both user summaries, metrics and the comparison
    """
    original_findings = extract_findings(original_output)
    processed_findings = extract_findings(processed_output)

    original_summary = format_user_summary(
        extract_blocks(file_path, original_findings, source=original_source)
    )
    processed_summary = format_user_summary(
        extract_blocks(file_path, processed_findings, source=processed_source)
    )
    logger.debug(f"[QualityReport] Analysis results for original file:\n{original_summary}")
    logger.debug(f"[QualityReport] Analysis results for processed file:\n{processed_summary}")

    return QualityReport(
        file_name=Path(file_path).name,
        original_summary=original_summary,
        processed_summary=processed_summary,
        comparison=compare_findings(original_findings, processed_findings),
        original_metrics=summarize_metrics(original_summary),
        processed_metrics=summarize_metrics(processed_summary),
    )
