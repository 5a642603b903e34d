"""Sparkline plotting: numeric sequence -> polyline inside a fixed canvas.

Normalization keeps a 3-unit margin on every side. The vertical axis is
inverted so higher values plot higher on screen. Equal extrema (and a single
point) plot on the vertical centre line instead of dividing by zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

MARGIN = 3

Coordinate = Tuple[float, float]


def _num(v: float) -> str:
    # SVG path numbers: integers without a trailing ".0", floats trimmed
    if float(v).is_integer():
        return str(int(v))
    return f"{v:.3f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class SparklinePath:
    width: int
    height: int
    coordinates: List[Coordinate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    @property
    def d(self) -> str:
        """SVG path data ('M x y L x y ...'); empty string for no points."""
        return " ".join(
            f"{'M' if i == 0 else 'L'} {_num(x)} {_num(y)}"
            for i, (x, y) in enumerate(self.coordinates)
        )


def plot(points: Sequence[float], width: int, height: int) -> SparklinePath:
    n = len(points)
    if n == 0:
        return SparklinePath(width, height)
    if n == 1:
        return SparklinePath(width, height, [(float(MARGIN), height / 2)])

    lo = min(points)
    hi = max(points)
    span = hi - lo
    step = (width - 2 * MARGIN) / (n - 1)

    def norm(v: float) -> float:
        if span == 0:
            return height / 2
        return height - ((v - lo) / span) * (height - 2 * MARGIN) - MARGIN

    coords = [(MARGIN + i * step, norm(v)) for i, v in enumerate(points)]
    return SparklinePath(width, height, coords)
