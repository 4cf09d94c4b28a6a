"""Data model shared by the extraction, batching and splicing stages.

Findings come from an external analyzer, CodeBlocks are built per analysis run
and consumed by the batch planner and the marker splice engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .exceptions import InvalidFindingError, InvalidSpanError


class BlockKind(str, Enum):
    """Syntax node kinds that can enclose a finding"""

    METHOD = "Method"
    TYPE = "Type"
    LAMBDA = "Lambda"
    STATIC_INITIALIZER = "StaticInitializer"
    UNKNOWN = "Unknown"


class SummaryLevel(str, Enum):
    """How much of a Type declaration a summary keeps"""

    FULL = "full"  # signature + fields + method signatures
    MINIMAL = "minimal"  # signature + fields


@dataclass(frozen=True)
class Finding:
    """A single static-analysis finding attached to a source line."""

    line: int
    rule_id: str
    message: str

    def __post_init__(self) -> None:
        if self.line < 1:
            raise InvalidFindingError(f"Finding line must be >= 1, got {self.line}")


@dataclass(frozen=True, order=True)
class SpanKey:
    """Inclusive 1-based line range identifying a block within one file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise InvalidSpanError(f"Invalid span {self.start}-{self.end}")

    def contains(self, other: "SpanKey") -> bool:
        return self.start <= other.start and other.end <= self.end

    def contains_line(self, line: int) -> bool:
        return self.start <= line <= self.end

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class CodeBlock:
    """A syntax block carrying the findings it encloses

    `text` is verbatim source for Method/Lambda/StaticInitializer blocks and
    a summary for Type blocks. Container blocks synthesized purely as context
    carry no findings.
    """

    file_path: str
    kind: BlockKind
    start_line: int
    end_line: int
    text: str
    findings: List[Finding] = field(default_factory=list)
    # Declared identifier from the syntax tree; None for lambdas and initializers
    name: Optional[str] = None

    def __post_init__(self) -> None:
        # Validates the range
        SpanKey(self.start_line, self.end_line)

    @property
    def span(self) -> SpanKey:
        return SpanKey(self.start_line, self.end_line)

    @property
    def size(self) -> int:
        """Character count used against a batch budget."""
        return len(self.text) if self.text else 0

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    @property
    def is_container(self) -> bool:
        return self.kind == BlockKind.TYPE


@dataclass
class BatchPlan:
    """Result of packing blocks into size-bounded request batches."""

    batches: List[List[CodeBlock]]
    skipped: List[CodeBlock]
    advisory: str

    def all_blocks(self) -> List[CodeBlock]:
        """Flatten batches, then skipped blocks, in order."""
        blocks: List[CodeBlock] = []
        for batch in self.batches:
            blocks.extend(batch)
        blocks.extend(self.skipped)
        return blocks


@dataclass(frozen=True)
class Replacement:
    """Collaborator-supplied implementation for a named entity."""

    name: str
    implementation_text: str
