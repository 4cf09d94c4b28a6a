"""
Batch planner: pack code blocks into character-budgeted request batches.

Blocks are grouped under their owning container (the innermost Type block whose
span contains them) and each batch is filled container by container:

- A container contributes the longest FIFO run of its queued members that fits
  the batch's remaining budget together with the container's own summary.
- Members that do not fit stay queued and are retried on the next pass, so a
  class's findings stay together where possible instead of being scattered for
  tighter packing.
- A block larger than the whole budget is never batched; it lands in
  ``skipped`` and is reported in the advisory.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional

from .config import settings
from .exceptions import BudgetError
from .models import BatchPlan, CodeBlock

logger = logging.getLogger(__name__)


@dataclass
class _ContainerGroup:
    """A container block and the member blocks still waiting for a batch"""

    container: Optional[CodeBlock]
    queue: Deque[CodeBlock] = field(default_factory=deque)
    # Container carries findings of its own and has not been batched yet
    send_container: bool = False

    @property
    def header_size(self) -> int:
        return self.container.size if self.container is not None else 0

    @property
    def pending(self) -> bool:
        return bool(self.queue) or self.send_container

    @property
    def label(self) -> str:
        if self.container is None:
            return "unowned blocks"
        return f"container starting at line {self.container.start_line}"


def _owner(member: CodeBlock, groups: List[_ContainerGroup]) -> Optional[_ContainerGroup]:
    best = None
    for group in groups:
        if not group.container.span.contains(member.span):
            continue
        if best is None or group.container.span.length < best.container.span.length:
            best = group
    return best


def _build_groups(blocks: List[CodeBlock], budget: int, skipped: List[CodeBlock]) -> List[_ContainerGroup]:
    groups = [_ContainerGroup(container=b) for b in blocks if b.is_container]
    orphans = _ContainerGroup(container=None)

    for group in groups:
        container = group.container
        if not container.has_findings:
            continue
        if container.size > budget:
            logger.warning(
                f"[BatchPlanner] Block too large to send (startLine: {container.start_line}, "
                f"type: {container.kind.value}). It will be skipped."
            )
            skipped.append(container)
        else:
            group.send_container = True

    for block in blocks:
        if block.is_container:
            continue
        if block.size > budget:
            logger.warning(
                f"[BatchPlanner] Block too large to send (startLine: {block.start_line}, "
                f"type: {block.kind.value}). It will be skipped."
            )
            skipped.append(block)
            continue
        owner = _owner(block, groups) or orphans
        owner.queue.append(block)

    if orphans.queue:
        groups.append(orphans)
    return groups


def _fill(group: _ContainerGroup, batch: List[CodeBlock], used: int, budget: int) -> int:
    """Move as much of ``group`` as fits into ``batch``; return characters added."""
    remaining = budget - used
    taken: List[CodeBlock] = []
    total = group.header_size

    while group.queue and total + group.queue[0].size <= remaining:
        member = group.queue.popleft()
        taken.append(member)
        total += member.size

    if taken or (group.send_container and group.header_size <= remaining):
        if group.container is not None:
            batch.append(group.container)
        batch.extend(taken)
        group.send_container = False
        logger.info(f"[BatchPlanner] Added {group.label} with {len(taken)} block(s) to batch")
        return total

    if not batch and group.queue:
        # Member fits the budget alone but never together with its container
        member = group.queue.popleft()
        batch.append(member)
        logger.warning(
            f"[BatchPlanner] Sending block at line {member.start_line} without its container "
            f"summary; together they exceed {budget} chars"
        )
        return member.size

    return 0


def _advisory(batch_count: int, skipped: List[CodeBlock], budget: int) -> str:
    if batch_count == 0:
        if skipped:
            noun = "block exceeds" if len(skipped) == 1 else "blocks exceed"
            return (
                f"Unable to process your code: all {len(skipped)} {noun} "
                f"the size limit of {budget} characters."
            )
        return "No code blocks were found to process."

    message = (
        f"Your code was split into {batch_count} {'batch' if batch_count == 1 else 'batches'} "
        f"to stay within the size limit of {budget} characters.\n"
        "All detected issues that fit will be sent for refactoring."
    )
    if skipped:
        noun = "block was" if len(skipped) == 1 else "blocks were"
        message += f"\n{len(skipped)} {noun} too large to process and skipped."
    return message


def plan_batches(blocks: Iterable[CodeBlock], budget: Optional[int] = None) -> BatchPlan:
    """
    Partition blocks into batches whose summed text size stays within budget.

    Args:
        blocks: Blocks from extract_blocks (containers and members, any order)
        budget: Character budget per batch (defaults to settings.batch_char_limit)

    Returns:
        BatchPlan with ordered batches, skipped oversize blocks and an advisory

    Raises:
        BudgetError: if budget is not positive
    """
    if budget is None:
        budget = settings.batch_char_limit
    if budget <= 0:
        raise BudgetError(f"Batch budget must be positive, got {budget}")

    blocks = list(blocks)
    skipped: List[CodeBlock] = []
    batches: List[List[CodeBlock]] = []
    groups = _build_groups(blocks, budget, skipped)

    while any(group.pending for group in groups):
        batch: List[CodeBlock] = []
        used = 0
        for group in groups:
            if not group.pending:
                continue
            used += _fill(group, batch, used, budget)
            if group.queue:
                logger.warning(f"[BatchPlanner] Deferring {len(group.queue)} remaining block(s) for {group.label}")

        if not batch:
            leftovers = [block for group in groups for block in group.queue]
            logger.warning(
                f"[BatchPlanner] Unable to add any blocks to a batch; moving {len(leftovers)} block(s) to skipped"
            )
            skipped.extend(leftovers)
            break

        batches.append(batch)
        logger.info(f"[BatchPlanner] Created batch {len(batches)} with approx. {used} chars")

    return BatchPlan(batches=batches, skipped=skipped, advisory=_advisory(len(batches), skipped, budget))
