"""Span forest builder.

Spans are stored in an arena (a flat list) and linked through child index
lists, so orphan and cycle handling reduce to index lookups.

- Duplicate span ids: the last record wins
- Parent id missing from the batch: the span becomes a root (orphan)
- Parent links forming a cycle: the earliest span of the cycle becomes a root
- Children and roots are ordered by start time, ties broken by span id
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from stdout_tree.spans.schema import SpanRecord

logger = logging.getLogger(__name__)


def order_key(record: SpanRecord) -> tuple[int, str]:
    """Sort key giving a deterministic start-time order."""
    start = record.start_time if record.start_time is not None else 0
    return start, record.span_id


@dataclass
class TreeNode:
    """One span in the forest arena."""

    record: SpanRecord
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    depth: int = 0


@dataclass
class Forest:
    """Root trees reconstructed from one batch."""

    nodes: list[TreeNode] = field(default_factory=list)
    roots: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def records(self) -> Iterator[SpanRecord]:
        for node in self.nodes:
            yield node.record

    def walk(self) -> Iterator[TreeNode]:
        """Depth-first pre-order traversal over all roots."""
        stack = list(reversed(self.roots))
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))


def build_forest(records: Iterable[SpanRecord]) -> Forest:
    """Build the span forest for one batch."""
    latest: dict[str, SpanRecord] = {}
    for record in records:
        if record.span_id in latest:
            logger.debug(f"Duplicate span id {record.span_id}, keeping last record")
            # Re-insert so the surviving record keeps its latest position
            del latest[record.span_id]
        latest[record.span_id] = record

    forest = Forest(nodes=[TreeNode(record=r) for r in latest.values()])
    index = {node.record.span_id: i for i, node in enumerate(forest.nodes)}

    for i, node in enumerate(forest.nodes):
        parent = index.get(node.record.parent_span_id)
        if parent is None or parent == i:
            forest.roots.append(i)
        else:
            node.parent = parent
            forest.nodes[parent].children.append(i)

    reached = _mark_reachable(forest, forest.roots)

    # Whatever no root reaches is on a parent cycle or hangs off one
    while len(reached) < len(forest.nodes):
        unreached = min(
            (i for i in range(len(forest.nodes)) if i not in reached),
            key=lambda i: order_key(forest.nodes[i].record),
        )
        candidate = min(
            _find_cycle(forest, unreached),
            key=lambda i: order_key(forest.nodes[i].record),
        )
        node = forest.nodes[candidate]
        logger.debug(f"Parent cycle at span {node.record.span_id}, promoting to root")
        forest.nodes[node.parent].children.remove(candidate)
        node.parent = None
        forest.roots.append(candidate)
        reached |= _mark_reachable(forest, [candidate])

    for node in forest.nodes:
        node.children.sort(key=lambda i: order_key(forest.nodes[i].record))
    forest.roots.sort(key=lambda i: order_key(forest.nodes[i].record))

    for root in forest.roots:
        forest.nodes[root].depth = 0
    for node in forest.walk():
        for child in node.children:
            forest.nodes[child].depth = node.depth + 1

    return forest


def _find_cycle(forest: Forest, start: int) -> list[int]:
    """Follow parent links from an unreachable node until they loop."""
    seen: dict[int, int] = {}
    path = []
    i = start
    while i not in seen:
        seen[i] = len(path)
        path.append(i)
        i = forest.nodes[i].parent
    return path[seen[i]:]


def _mark_reachable(forest: Forest, starts: list[int]) -> set[int]:
    reached = set()
    stack = list(starts)
    while stack:
        i = stack.pop()
        if i in reached:
            continue
        reached.add(i)
        stack.extend(forest.nodes[i].children)
    return reached
