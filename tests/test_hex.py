import math
import random
import unittest

from core.errors import EmptyLayoutError
from core.hex.grid import GridMetrics, compute_bounds, grid_extent, parse_layout_mode
from core.hex.layout import load
from core.hex.order import ordered_cells

MODES = ["odd-r", "even-r", "odd-q", "even-q"]


def offset_neighbors(q, r, rotated=False, even_offset=False):
    """Six neighbours of (q, r). Staggered rows/quolumns lean towards +q (or +r)."""
    offset_test = 0 if even_offset else 1
    if not rotated:
        lean = (0, 1) if r % 2 == offset_test else (-1, 0)
        return ([(q - 1, r), (q + 1, r)]
                + [(q + dq, r + dr) for dr in (-1, 1) for dq in lean])

    lean = (0, 1) if q % 2 == offset_test else (-1, 0)
    return ([(q, r - 1), (q, r + 1)]
            + [(q + dq, r + dr) for dq in (-1, 1) for dr in lean])


def block_layout(mode, n=6):
    return load({
        "layout": mode,
        "hexes": {f"{q},{r}": {"q": q, "r": r} for q in range(n) for r in range(n)},
    })


class TestLayoutMode(unittest.TestCase):
    def test_parse_layout_mode(self):
        self.assertEqual(parse_layout_mode("odd-r"), (False, False))
        self.assertEqual(parse_layout_mode("even-r"), (False, True))
        self.assertEqual(parse_layout_mode("odd-q"), (True, False))
        self.assertEqual(parse_layout_mode("even-q"), (True, True))

    def test_default_is_pointy_odd(self):
        self.assertEqual(parse_layout_mode(""), (False, False))
        self.assertEqual(parse_layout_mode("r"), (False, False))


class TestBounds(unittest.TestCase):
    def test_bounds_independent_of_order(self):
        cells = list(block_layout("odd-r", 4).cells.values())
        expected = compute_bounds(cells)
        for _ in range(5):
            random.shuffle(cells)
            self.assertEqual(compute_bounds(cells), expected)
        self.assertEqual(expected.min, (0, 0))
        self.assertEqual(expected.max, (3, 3))
        self.assertEqual(expected.n_quols, 4)
        self.assertEqual(expected.n_rows, 4)

    def test_negative_coordinates(self):
        doc = load({"layout": "odd-r", "hexes": {
            "a": {"q": -2, "r": 3}, "b": {"q": 4, "r": -1}}})
        bounds = compute_bounds(doc.cells.values())
        self.assertEqual(bounds.min, (-2, -1))
        self.assertEqual(bounds.max, (4, 3))

    def test_empty_layout_fails(self):
        with self.assertRaises(EmptyLayoutError):
            compute_bounds([])
        with self.assertRaises(EmptyLayoutError):
            GridMetrics.from_layout(load({"layout": "odd-r", "hexes": {}}))


class TestGeometry(unittest.TestCase):
    def test_pitches(self):
        metrics = GridMetrics.from_layout(block_layout("odd-r", 2), size=90)
        self.assertAlmostEqual(metrics.cadence, 90 * math.cos(math.pi / 6))
        self.assertAlmostEqual(metrics.main_pitch, 2 * metrics.cadence)
        self.assertAlmostEqual(metrics.cross_pitch, 135)

    def test_grid_extent(self):
        self.assertEqual(grid_extent(3, 10, main_axis=True), 25)
        self.assertEqual(grid_extent(3, 10, main_axis=False), 20)
        self.assertEqual(grid_extent(1, 10, main_axis=False), 0)

    def test_width_height(self):
        pointy = GridMetrics.from_layout(block_layout("odd-r", 3))
        self.assertAlmostEqual(pointy.width, pointy.main_pitch * 2.5)
        self.assertAlmostEqual(pointy.height, pointy.cross_pitch * 2)
        flat = GridMetrics.from_layout(block_layout("odd-q", 3))
        self.assertAlmostEqual(flat.width, flat.cross_pitch * 2)
        self.assertAlmostEqual(flat.height, flat.main_pitch * 2.5)

    def test_single_hex_projection(self):
        metrics = GridMetrics.from_layout(
            load({"layout": "odd-r", "hexes": {"1,1": {"q": 1, "r": 1}}}), size=90)
        x, y = metrics.project(1, 1)
        self.assertAlmostEqual(x, metrics.main_pitch + metrics.cadence)
        self.assertAlmostEqual(y, -135)

    def test_even_offset_staggers_even_rows(self):
        odd = GridMetrics.from_layout(block_layout("odd-r", 2))
        even = GridMetrics.from_layout(block_layout("even-r", 2))
        self.assertAlmostEqual(odd.project(0, 0)[0], 0)
        self.assertAlmostEqual(odd.project(0, 1)[0], odd.cadence)
        self.assertAlmostEqual(even.project(0, 0)[0], even.cadence)
        self.assertAlmostEqual(even.project(0, 1)[0], 0)

    def test_flat_top_staggers_columns(self):
        metrics = GridMetrics.from_layout(block_layout("odd-q", 2))
        x0, y0 = metrics.project(0, 0)
        x1, y1 = metrics.project(1, 0)
        self.assertAlmostEqual(x1 - x0, metrics.cross_pitch)
        self.assertAlmostEqual(y0 - y1, metrics.cadence)

    def test_projection_is_deterministic(self):
        for mode in MODES:
            a = GridMetrics.from_layout(block_layout(mode))
            b = GridMetrics.from_layout(block_layout(mode))
            for q, r in [(0, 0), (3, 2), (-4, -7), (5, 5)]:
                self.assertEqual(a.project(q, r), b.project(q, r))

    def test_main_axis_pitch(self):
        for mode in MODES:
            metrics = GridMetrics.from_layout(block_layout(mode))
            for q, r in [(0, 0), (1, 1), (2, 3), (-1, -2)]:
                if metrics.rotated:
                    _, y0 = metrics.project(q, r)
                    _, y1 = metrics.project(q, r + 1)
                    self.assertAlmostEqual(y0 - y1, metrics.main_pitch)
                else:
                    x0, _ = metrics.project(q, r)
                    x1, _ = metrics.project(q + 1, r)
                    self.assertAlmostEqual(x1 - x0, metrics.main_pitch)

    def test_neighbours_equidistant(self):
        for mode in MODES:
            metrics = GridMetrics.from_layout(block_layout(mode))
            for q, r in [(2, 2), (2, 3), (3, 2), (3, 3)]:
                cx, cy = metrics.project(q, r)
                nearest = set()
                for oq in range(6):
                    for orow in range(6):
                        if (oq, orow) == (q, r):
                            continue
                        x, y = metrics.project(oq, orow)
                        if math.isclose(math.hypot(x - cx, y - cy), metrics.main_pitch):
                            nearest.add((oq, orow))
                neighbours = offset_neighbors(q, r, metrics.rotated, metrics.even_offset)
                self.assertEqual(nearest, set(neighbours), f"{mode} at {(q, r)}")

    def test_view_box_pads_grid(self):
        metrics = GridMetrics.from_layout(
            load({"layout": "odd-r", "hexes": {"1,1": {"q": 1, "r": 1}}}), size=90)
        x, y, w, h = metrics.view_box()
        self.assertAlmostEqual(w, metrics.width + 3 * metrics.cadence)
        self.assertAlmostEqual(h, 270)
        self.assertAlmostEqual(y, -270)

    def test_outline_variants(self):
        pointy = GridMetrics.from_layout(block_layout("odd-r", 2))
        flat = GridMetrics.from_layout(block_layout("odd-q", 2))
        self.assertNotEqual(pointy.outline_path(), flat.outline_path())
        self.assertTrue(pointy.outline_path().endswith("Z"))


class TestDrawOrder(unittest.TestCase):
    def test_rows_descending_quolumns_ascending(self):
        cells = list(block_layout("odd-r", 4).cells.values())
        random.shuffle(cells)
        ordered = ordered_cells(cells)
        for a, b in zip(ordered, ordered[1:]):
            self.assertTrue(a.r > b.r or (a.r == b.r and a.q < b.q))
        self.assertEqual((ordered[0].q, ordered[0].r), (0, 3))
        self.assertEqual((ordered[-1].q, ordered[-1].r), (3, 0))

    def test_ties_keep_source_order(self):
        doc = load({"layout": "odd-r", "hexes": {
            "first": {"q": 1, "r": 1}, "second": {"q": 1, "r": 1}, "top": {"q": 5, "r": 2}}})
        keys = [c.key for c in ordered_cells(doc.cells.values())]
        self.assertEqual(keys, ["top", "first", "second"])


if __name__ == '__main__':
    unittest.main()
