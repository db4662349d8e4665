"""Writing PDF path construction and painting operators."""

from __future__ import annotations

import enum
import math
import struct
from collections.abc import Sequence
from decimal import Decimal
from typing import NamedTuple, TextIO


class FillMode(enum.Enum):
    """Rule deciding which areas a fill paints."""

    NON_ZERO = "f"
    EVEN_ODD = "f*"


class Point(NamedTuple):
    x: float
    y: float


def _to_f32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _format(value: float) -> str:
    v = _to_f32(float(value))
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    if v == 0:
        return "-0" if math.copysign(1.0, v) < 0 else "0"
    text = repr(v)
    for precision in range(1, 10):
        candidate = f"{v:.{precision}g}"
        if _to_f32(float(candidate)) == v:
            text = candidate
            break
    text = format(Decimal(text), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _point(p: Sequence[float]) -> Point:
    x, y = p
    return Point(float(x), float(y))


class PathBuilder:
    """Writes path operators to a text stream, tracking the current point."""

    def __init__(self, out: TextIO, start: Sequence[float]) -> None:
        self.out = out
        self.current = _point(start)

    def _emit(self, *parts: object) -> None:
        self.out.write(" ".join(str(p) for p in parts) + "\n")

    def _emit_points(self, op: str, *points: Point) -> None:
        coords = [_format(c) for p in points for c in p]
        self._emit(*coords, op)

    def move_to(self, p: Sequence[float]) -> None:
        """Begin a new subpath at `p` without a connecting segment."""
        p = _point(p)
        self._emit_points("m", p)
        self.current = p

    def line_to(self, p: Sequence[float]) -> None:
        """Append a straight segment from the current point to `p`."""
        p = _point(p)
        self._emit_points("l", p)
        self.current = p

    def quadratic(self, c: Sequence[float], p: Sequence[float]) -> None:
        """Append a quadratic Bézier curve to `p` with control point `c`.

        PDF has no quadratic curves, so it is written as the equivalent cubic.
        """
        c, p = _point(c), _point(p)
        cur = self.current
        c1 = Point(
            2.0 / 3.0 * c.x + 1.0 / 3.0 * cur.x, 2.0 / 3.0 * c.y + 1.0 / 3.0 * cur.y
        )
        c2 = Point(2.0 / 3.0 * c.x + 1.0 / 3.0 * p.x, 2.0 / 3.0 * c.y + 1.0 / 3.0 * p.y)
        self._emit_points("c", c1, c2, p)
        self.current = p

    def cubic(
        self, c1: Sequence[float], c2: Sequence[float], p: Sequence[float]
    ) -> None:
        """Append a cubic Bézier curve to `p` with control points `c1` and `c2`."""
        c1, c2, p = _point(c1), _point(c2), _point(p)
        if c1 == self.current:
            self._emit_points("v", c2, p)
        elif c2 == self.current:
            self._emit_points("y", c1, p)
        else:
            self._emit_points("c", c1, c2, p)
        self.current = p

    def close(self) -> None:
        """Close the current subpath."""
        self._emit("h")

    def fill(self, mode: FillMode) -> None:
        """Fill the path using the given rule."""
        self._emit(FillMode(mode).value)


__all__ = ["FillMode", "PathBuilder", "Point"]