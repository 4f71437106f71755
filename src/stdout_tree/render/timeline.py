"""Mapping of span timestamps onto a fixed-width timeline column."""

import math
from dataclasses import dataclass

from stdout_tree.render.tree import Forest
from stdout_tree.spans.schema import SpanRecord

MIN_BAR_WIDTH = 1


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class BarGeometry:
    """Placement of one bar in the timeline column.

    A length of zero marks a zero-duration span or an event, drawn as a
    single marker character at ``start_col``.
    """

    start_col: int
    length: int

    @property
    def is_marker(self) -> bool:
        return self.length == 0


class Timeline:
    """Global timeline scale for one batch."""

    def __init__(self, origin: int, total_ns: int, bar_width: int):
        self.origin = origin
        self.total_ns = max(1, total_ns)
        self.bar_width = max(MIN_BAR_WIDTH, bar_width)
        self.scale = self.bar_width / self.total_ns

    @classmethod
    def for_forest(cls, forest: Forest, bar_width: int) -> "Timeline":
        """Scale from the earliest start to the latest end of the whole forest."""
        starts = []
        ends = []
        for record in forest.records():
            if record.start_time is not None:
                starts.append(record.start_time)
                ends.append(record.start_time + record.duration_ns)
            elif record.end_time is not None:
                starts.append(record.end_time)
                ends.append(record.end_time)

        if not starts:
            return cls(0, 1, bar_width)
        return cls(min(starts), max(ends) - min(starts), bar_width)

    def place(self, record: SpanRecord) -> BarGeometry:
        start = record.start_time if record.start_time is not None else record.end_time
        duration = record.duration_ns

        length = 0
        if duration > 0:
            length = min(self.bar_width, max(1, round_half_up(duration * self.scale)))

        start_col = self._column(start)
        if start_col + length > self.bar_width:
            # Keep the length, move the bar left
            start_col = self.bar_width - length
        return BarGeometry(start_col=start_col, length=length)

    def point(self, timestamp: int | None) -> BarGeometry:
        return BarGeometry(start_col=self._column(timestamp), length=0)

    def _column(self, timestamp: int | None) -> int:
        if timestamp is None:
            return 0
        offset = max(0, timestamp - self.origin)
        return min(self.bar_width - 1, round_half_up(offset * self.scale))
