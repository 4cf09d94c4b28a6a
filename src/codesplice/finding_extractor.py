"""Extract findings from line-oriented static-analyzer output.

Each report line has the shape ``<path>:<line>: <ruleId>: <message>``.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import InvalidFindingError
from .models import Finding

logger = logging.getLogger(__name__)

FINDING_LINE_PATTERN = re.compile(r"^(?P<path>.+?):(?P<line>\d+):\s*(?P<rule>[\w-]+):\s*(?P<message>.+)$")


def _parse_line(raw: str) -> Optional[Tuple[str, Finding]]:
    match = FINDING_LINE_PATTERN.match(raw.strip())
    if not match:
        logger.warning(f"[FindingExtractor] Skipping unrecognized analyzer line: {raw.strip()}")
        return None
    try:
        finding = Finding(
            line=int(match.group("line")),
            rule_id=match.group("rule"),
            message=match.group("message").strip(),
        )
    except InvalidFindingError as e:
        logger.warning(f"[FindingExtractor] Skipping invalid finding entry '{raw.strip()}': {e}")
        return None
    return match.group("path"), finding


def extract_findings(analyzer_output: str) -> List[Finding]:
    """
    Extract findings from raw analyzer output.

    Blank lines are ignored silently; any other line that does not match the
    report pattern is skipped with a warning.

    Args:
        analyzer_output: Raw text produced by the analyzer

    Returns:
        Findings in report order
    """
    findings = [finding for _, finding in _iter_findings(analyzer_output)]
    logger.info(f"[FindingExtractor] Extracted {len(findings)} findings from analyzer output")
    return findings


def extract_findings_by_file(analyzer_output: str) -> Dict[str, List[Finding]]:
    """Same as extract_findings, keyed by reported path in first-seen order."""
    by_file: Dict[str, List[Finding]] = {}
    for path, finding in _iter_findings(analyzer_output):
        by_file.setdefault(path, []).append(finding)
    return by_file


def _iter_findings(analyzer_output: str) -> Iterator[Tuple[str, Finding]]:
    for raw in (analyzer_output or "").splitlines():
        if not raw.strip():
            continue
        parsed = _parse_line(raw)
        if parsed is not None:
            yield parsed
