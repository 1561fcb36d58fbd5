"""
HexJSON Reference: layout tokens odd-r, even-r, odd-q, even-q.
Purpose: Hex geometry - pitches, bounds, axial to pixel projection, shared outline path.
Dependencies: core/hex/layout.py, core/errors.py, core/config.py, math.
Ext Hooks: pixel_to_hex for hit testing in the preview.
Client/Server: Shared logic; the client renders from it, the server renders SVG from it.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from core.config import HEX_SIZE, PADDING_FACTOR
from core.errors import EmptyLayoutError
from core.hex.layout import CellDefinition, LayoutDocument


def parse_layout_mode(token: str) -> Tuple[bool, bool]:
    """Return (rotated, even_offset). Default is pointy-topped, odd offset."""
    rotated = token.endswith("q")  # flat-topped, columns are staggered
    even_offset = token.startswith("even")
    return rotated, even_offset


@dataclass(frozen=True)
class BoundingBox:
    min: Tuple[int, int]  # (q_min, r_min) - bottom left
    max: Tuple[int, int]  # (q_max, r_max) - top right

    @property
    def n_quols(self) -> int:
        return self.max[0] - self.min[0] + 1

    @property
    def n_rows(self) -> int:
        return self.max[1] - self.min[1] + 1


def compute_bounds(cells: Iterable[CellDefinition]) -> BoundingBox:
    cells = iter(cells)
    first = next(cells, None)
    if first is None:
        raise EmptyLayoutError("Layout has no hexes")

    q_min = q_max = first.q
    r_min = r_max = first.r
    for cell in cells:
        q_min, q_max = min(q_min, cell.q), max(q_max, cell.q)
        r_min, r_max = min(r_min, cell.r), max(r_max, cell.r)
    return BoundingBox(min=(q_min, r_min), max=(q_max, r_max))


def grid_extent(n: int, pitch: float, main_axis: bool) -> float:
    """Extent of n rows/quolumns. The main axis gains half a pitch from the stagger."""
    if main_axis:
        return pitch * (n - 1 + 0.5)
    return pitch * (n - 1)


def hex_outline_path(size: float, cadence: float, rotated: bool) -> str:
    """SVG path of a single hex centred on the origin."""
    s, c = size, cadence
    if rotated:
        return (f"M{-s / 2} {-c}h{s} l{s / 2} {c} l{-s / 2} {c}h{-s} "
                f"l{-s / 2} {-c}Z")
    return (f"M{-c} {-s / 2}l{c} {-s / 2}l{c} {s / 2}v{s}"
            f"l{-c} {s / 2}l{-c} {-s / 2}Z")


def hex_corners(x: float, y: float, size: float, rotated: bool):
    """Six corner points of the hex centred at (x, y), same shape as hex_outline_path."""
    start = 0 if rotated else 30
    return [
        (x + size * math.cos(math.radians(start + 60 * i)),
         y + size * math.sin(math.radians(start + 60 * i)))
        for i in range(6)
    ]


@dataclass(frozen=True)
class GridMetrics:
    """
    Derived once per loaded layout.
    - size: side of a hex; row height (pointy) or quolumn width (flat).
    - cadence: the orthogonal dimension, size * cos(30deg).
    - main_pitch / cross_pitch: spacing along the staggered and the stacked axis.
    """
    size: float
    cadence: float
    main_pitch: float
    cross_pitch: float
    rotated: bool
    even_offset: bool
    width: float
    height: float
    bounds: BoundingBox

    @classmethod
    def from_layout(cls, document: LayoutDocument, size: float = HEX_SIZE) -> "GridMetrics":
        rotated, even_offset = parse_layout_mode(document.layout_mode)
        bounds = compute_bounds(document.cells.values())

        cadence = size * math.cos(math.pi / 6)
        main_pitch = cadence * 2
        cross_pitch = size * 3 / 2

        if rotated:
            width = grid_extent(bounds.n_quols, cross_pitch, main_axis=False)
            height = grid_extent(bounds.n_rows, main_pitch, main_axis=True)
        else:
            width = grid_extent(bounds.n_quols, main_pitch, main_axis=True)
            height = grid_extent(bounds.n_rows, cross_pitch, main_axis=False)

        return cls(size=size, cadence=cadence, main_pitch=main_pitch,
                   cross_pitch=cross_pitch, rotated=rotated, even_offset=even_offset,
                   width=width, height=height, bounds=bounds)

    def project(self, q: int, r: int) -> Tuple[float, float]:
        """Convert axial coordinates to pixel position. Screen y grows downward, r upward."""
        offset_test = 0 if self.even_offset else 1
        if not self.rotated:
            q_offset = self.cadence if abs(r % 2) == offset_test else 0
            return (self.main_pitch * q + q_offset,
                    self.height - self.cross_pitch * r)

        r_offset = self.cadence if abs(q % 2) == offset_test else 0
        return (self.cross_pitch * q,
                self.height - self.main_pitch * r - r_offset)

    @property
    def padding(self) -> Tuple[float, float]:
        if self.rotated:
            return self.size * PADDING_FACTOR, self.cadence * PADDING_FACTOR
        return self.cadence * PADDING_FACTOR, self.size * PADDING_FACTOR

    def view_box(self) -> Tuple[float, float, float, float]:
        """(x, y, width, height) framing every hex, origin at the top-left hex."""
        origin_x, origin_y = self.project(self.bounds.min[0], self.bounds.max[1])
        pad_x, pad_y = self.padding
        return (origin_x - pad_x, origin_y - pad_y,
                self.width + 2 * pad_x, self.height + 2 * pad_y)

    def outline_path(self) -> str:
        return hex_outline_path(self.size, self.cadence, self.rotated)
