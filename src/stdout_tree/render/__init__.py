"""Tree rendering engine."""

from stdout_tree.render.format import (
    ColorClass,
    Layout,
    RenderedLine,
    RenderRow,
    RowFormatter,
    as_text,
    color_for,
    format_duration,
    truncate,
)
from stdout_tree.render.printer import (
    DEFAULT_WIDTH,
    RenderConfig,
    render_forest,
    render_plain,
    render_records,
)
from stdout_tree.render.semantics import SpanSemantics, describe
from stdout_tree.render.timeline import BarGeometry, Timeline
from stdout_tree.render.tree import Forest, TreeNode, build_forest

__all__ = [
    "BarGeometry",
    "ColorClass",
    "DEFAULT_WIDTH",
    "Forest",
    "Layout",
    "RenderConfig",
    "RenderRow",
    "RenderedLine",
    "RowFormatter",
    "SpanSemantics",
    "Timeline",
    "TreeNode",
    "as_text",
    "build_forest",
    "color_for",
    "describe",
    "format_duration",
    "render_forest",
    "render_plain",
    "render_records",
    "truncate",
]
