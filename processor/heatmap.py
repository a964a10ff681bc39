"""Pointer-position binning into a unit grid."""

import math
from collections.abc import Iterable
from dataclasses import asdict, dataclass

from producers.schemas import Event


@dataclass(frozen=True)
class HeatmapPoint:
    x: int
    y: int
    value: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def bin_positions(events: Iterable[Event]) -> list[HeatmapPoint]:
    """
    Count cursor samples per (floor(x), floor(y)) cell.

    Events without a cursor position, or with a non-finite coordinate, are
    skipped. Points come out in first-occurrence order of their cell.
    """
    bins: dict[tuple[int, int], int] = {}
    for event in events:
        pos = event.metadata.cursor_position
        if pos is None or not pos.is_finite:
            continue
        key = (math.floor(pos.x), math.floor(pos.y))
        bins[key] = bins.get(key, 0) + 1
    return [HeatmapPoint(x=x, y=y, value=count) for (x, y), count in bins.items()]
