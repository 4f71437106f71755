"""Fixed-column row formatting and color policy."""

from dataclasses import dataclass, field
from enum import Enum

from rich.cells import cell_len, get_character_cell_size
from rich.text import Text

from stdout_tree.render.timeline import MIN_BAR_WIDTH, BarGeometry

# Whitespace between columns, e.g. between status and duration
COLUMN_GAP = 2

# Longest expected status is an HTTP status code or "ERR"
STATUS_WIDTH = 4

# Room for durations up to "99999ms"
DURATION_WIDTH = 7

MIN_NAME_WIDTH = 8

ELLIPSIS = "…"
FILL_CHAR = "="
MARKER_CHAR = "·"


class ColorClass(str, Enum):
    NEUTRAL = "neutral"
    ALERT = "alert"


STYLES = {
    ColorClass.NEUTRAL: None,
    ColorClass.ALERT: "red",
}


def color_for(is_error: bool) -> ColorClass:
    return ColorClass.ALERT if is_error else ColorClass.NEUTRAL


@dataclass(frozen=True)
class Layout:
    """Column widths for one output width."""

    name_width: int
    status_width: int
    duration_width: int
    bar_width: int

    @classmethod
    def for_width(cls, width: int) -> "Layout":
        bar_width = max(MIN_BAR_WIDTH, width // 5)
        status_width = STATUS_WIDTH + COLUMN_GAP
        duration_width = DURATION_WIDTH + COLUMN_GAP
        fixed = status_width + duration_width + COLUMN_GAP
        name_width = width - bar_width - fixed
        if name_width < MIN_NAME_WIDTH:
            # Narrow output gives up bar columns before name columns
            bar_width = max(MIN_BAR_WIDTH, width - fixed - MIN_NAME_WIDTH)
            name_width = MIN_NAME_WIDTH
        return cls(
            name_width=name_width,
            status_width=status_width,
            duration_width=duration_width,
            bar_width=bar_width,
        )


@dataclass
class RenderRow:
    """Display data for one span, ready for formatting."""

    depth: int
    kind_tag: str
    name: str
    status: str
    duration_ns: int
    geometry: BarGeometry
    event_count: int = 0
    color: ColorClass = ColorClass.NEUTRAL
    annotations: list[tuple[str, BarGeometry]] = field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        return duration_ms(self.duration_ns)


@dataclass(frozen=True)
class RenderedLine:
    text: str
    color: ColorClass = ColorClass.NEUTRAL


def truncate(text: str, width: int) -> str:
    """Shorten text to at most ``width`` terminal cells.

    Cuts only between characters and ends a shortened text with an ellipsis.
    Text that already fits is returned unchanged.
    """
    if cell_len(text) <= width:
        return text
    if width <= 0:
        return ""

    room = width - cell_len(ELLIPSIS)
    used = 0
    end = 0
    for char in text:
        size = get_character_cell_size(char)
        if used + size > room:
            break
        used += size
        end += 1
    return text[:end] + ELLIPSIS


def pad(text: str, width: int) -> str:
    return text + " " * max(0, width - cell_len(text))


def duration_ms(duration_ns: int) -> int:
    return (max(0, duration_ns) + 500_000) // 1_000_000


def format_duration(duration_ns: int) -> str:
    return f"{duration_ms(duration_ns)}ms"


def bar(geometry: BarGeometry) -> str:
    if geometry.is_marker:
        return " " * geometry.start_col + MARKER_CHAR
    return " " * geometry.start_col + FILL_CHAR * geometry.length


def _event_suffix(count: int) -> str:
    if count <= 0:
        return ""
    return f" ({count} event)" if count == 1 else f" ({count} events)"


class RowFormatter:
    """Formats render rows into text lines for a fixed layout."""

    def __init__(self, layout: Layout):
        self.layout = layout

    def format(self, row: RenderRow) -> list[RenderedLine]:
        lines = [RenderedLine(self.format_span(row), row.color)]
        for text, geometry in row.annotations:
            lines.append(
                RenderedLine(
                    self.format_annotation(text, row.depth + 1, geometry),
                    ColorClass.ALERT,
                )
            )
        return lines

    def format_span(self, row: RenderRow) -> str:
        layout = self.layout
        prefix = f"{' ' * row.depth}{row.kind_tag}  "
        suffix = _event_suffix(row.event_count)
        name_room = layout.name_width - cell_len(prefix) - cell_len(suffix)
        if name_room < 1:
            suffix = ""
            name_room = layout.name_width - cell_len(prefix)
        start = truncate(prefix + truncate(row.name, name_room) + suffix, layout.name_width)

        line = (
            pad(start, layout.name_width)
            + row.status.rjust(layout.status_width)
            + format_duration(row.duration_ns).rjust(layout.duration_width)
            + " " * COLUMN_GAP
            + bar(row.geometry)
        )
        return line.rstrip()

    def format_annotation(self, text: str, depth: int, geometry: BarGeometry) -> str:
        layout = self.layout
        text_width = layout.name_width + layout.status_width + layout.duration_width
        start = truncate(f"{' ' * depth}{text}", text_width)
        line = pad(start, text_width) + " " * COLUMN_GAP + bar(geometry)
        return line.rstrip()


def as_text(lines: list[RenderedLine]) -> Text:
    """Join rendered lines into one styled block, newline terminated."""
    block = Text()
    for line in lines:
        block.append(line.text, style=STYLES[line.color])
        block.append("\n")
    return block
