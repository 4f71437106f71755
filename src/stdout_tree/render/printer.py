"""Forest traversal producing the printable tree."""

from collections.abc import Iterable
from dataclasses import dataclass

from stdout_tree.render.format import (
    Layout,
    RenderedLine,
    RenderRow,
    RowFormatter,
    color_for,
)
from stdout_tree.render.semantics import describe
from stdout_tree.render.timeline import Timeline
from stdout_tree.render.tree import Forest, TreeNode, build_forest
from stdout_tree.spans.schema import SpanRecord

DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class RenderConfig:
    """Everything rendering depends on besides the batch itself."""

    width: int = DEFAULT_WIDTH
    show_attributes: bool = False


def build_row(node: TreeNode, timeline: Timeline, show_attributes: bool = False) -> RenderRow:
    record = node.record
    semantics = describe(record, show_attributes=show_attributes)
    return RenderRow(
        depth=node.depth,
        kind_tag=semantics.kind_tag,
        name=semantics.name,
        status=semantics.status,
        duration_ns=record.duration_ns,
        geometry=timeline.place(record),
        event_count=semantics.event_count,
        color=color_for(semantics.is_error),
        annotations=[
            (note.text, timeline.point(note.timestamp))
            for note in semantics.exceptions
        ],
    )


def render_forest(forest: Forest, config: RenderConfig | None = None) -> list[RenderedLine]:
    """Render every tree of the forest, roots in start order.

    Roots of different traces follow each other without a separator line.
    """
    config = config or RenderConfig()
    layout = Layout.for_width(config.width)
    timeline = Timeline.for_forest(forest, layout.bar_width)
    formatter = RowFormatter(layout)

    lines = []
    for node in forest.walk():
        row = build_row(node, timeline, show_attributes=config.show_attributes)
        lines.extend(formatter.format(row))
    return lines


def render_records(
    records: Iterable[SpanRecord], config: RenderConfig | None = None
) -> list[RenderedLine]:
    return render_forest(build_forest(records), config)


def render_plain(records: Iterable[SpanRecord], config: RenderConfig | None = None) -> str:
    """Render to uncolored text, one newline-terminated line per row."""
    return "".join(f"{line.text}\n" for line in render_records(records, config))
