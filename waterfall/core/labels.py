#!/usr/bin/env python3
"""
Annotation policy for the waterfall: which rows get a time label and
horizontal gridline, and which columns get a latency label and vertical
gridline.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

GRIDLINE_INTERVAL = 60  # rows between time gridlines (one minute at 1s/row)


@dataclass(frozen=True)
class Label:
    """A latency threshold in nanoseconds and its display text"""
    threshold: int
    text: str


LABELS: Tuple[Label, ...] = (
    Label(200, "200nS"),
    Label(500, "500nS"),
    Label(1_000, "1uS"),
    Label(2_000, "2uS"),
    Label(5_000, "5uS"),
    Label(10_000, "10uS"),
    Label(20_000, "20uS"),
    Label(50_000, "50uS"),
    Label(100_000, "100uS"),
    Label(200_000, "200uS"),
    Label(500_000, "500uS"),
    Label(1_000_000, "1mS"),
    Label(2_000_000, "2mS"),
    Label(5_000_000, "5mS"),
    Label(10_000_000, "10mS"),
    Label(20_000_000, "20mS"),
    Label(50_000_000, "50mS"),
    Label(100_000_000, "100mS"),
    Label(200_000_000, "200mS"),
    Label(500_000_000, "500mS"),
)


def is_gridline_row(row: int) -> bool:
    return row % GRIDLINE_INTERVAL == 0


def time_label(row: int) -> str:
    """HH:MM text for a gridline row; the minute field counts total elapsed minutes"""
    hour = row // 3600
    minute = row // 60
    return f"{hour:02d}:{minute:02d}"


class LabelCursor:
    """Walks the label table once, in ascending threshold order"""

    def __init__(self, labels: Tuple[Label, ...] = LABELS):
        self.labels = labels
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.labels)

    def match(self, value: int) -> Optional[Label]:
        """Consume and return the next label if value reaches its threshold"""
        if self.exhausted:
            return None
        label = self.labels[self.position]
        if value >= label.threshold:
            self.position += 1
            return label
        return None
