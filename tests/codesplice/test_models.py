"""Tests for the shared data model."""

import pytest

from codesplice.exceptions import CodeSpliceError, InvalidFindingError, InvalidSpanError
from codesplice.models import BatchPlan, BlockKind, CodeBlock, Finding, SpanKey


class TestSpanKey:
    """Tests for the (start, end) block key."""

    def test_rejects_start_after_end(self):
        """Verify a reversed range cannot be constructed."""
        with pytest.raises(InvalidSpanError):
            SpanKey(5, 4)

    def test_rejects_line_zero(self):
        """Verify lines are 1-based."""
        with pytest.raises(InvalidSpanError):
            SpanKey(0, 3)

    def test_single_line_span_is_valid(self):
        """Verify start == end is allowed."""
        assert SpanKey(3, 3).length == 0

    def test_equal_spans_are_equal_keys(self):
        """Verify spans work as dict keys by value."""
        mapping = {SpanKey(2, 5): "foo"}
        assert mapping[SpanKey(2, 5)] == "foo"

    def test_contains(self):
        """Verify containment is inclusive on both ends."""
        outer = SpanKey(1, 10)
        assert outer.contains(SpanKey(1, 10))
        assert outer.contains(SpanKey(2, 5))
        assert not outer.contains(SpanKey(5, 11))
        assert outer.contains_line(10)
        assert not outer.contains_line(11)

    def test_span_error_is_value_error(self):
        """Verify callers can catch either the package base or ValueError."""
        assert issubclass(InvalidSpanError, CodeSpliceError)
        assert issubclass(InvalidSpanError, ValueError)


class TestFinding:
    def test_rejects_non_positive_line(self):
        with pytest.raises(InvalidFindingError):
            Finding(line=0, rule_id="Rule", message="msg")

    def test_is_immutable(self):
        finding = Finding(line=3, rule_id="Rule", message="msg")
        with pytest.raises(AttributeError):
            finding.line = 4


class TestCodeBlock:
    def test_rejects_invalid_range(self):
        with pytest.raises(InvalidSpanError):
            CodeBlock(file_path="A.java", kind=BlockKind.METHOD, start_line=9, end_line=2, text="x")

    def test_size_is_text_length(self):
        block = CodeBlock(file_path="A.java", kind=BlockKind.METHOD, start_line=1, end_line=2, text="abcd")
        assert block.size == 4
        assert block.span == SpanKey(1, 2)
        assert block.has_findings is False
        assert block.is_container is False

    def test_type_blocks_are_containers(self):
        block = CodeBlock(file_path="A.java", kind=BlockKind.TYPE, start_line=1, end_line=2, text="class A {}")
        assert block.is_container is True


class TestBatchPlan:
    def test_all_blocks_flattens_batches_then_skipped(self, block_factory):
        a = block_factory(start=1, end=2)
        b = block_factory(start=3, end=4)
        c = block_factory(start=5, end=6)
        plan = BatchPlan(batches=[[a], [b]], skipped=[c], advisory="")
        assert plan.all_blocks() == [a, b, c]
