"""
HexJSON Reference: N/A (paint order).
Purpose: Deterministic draw order - rows top to bottom, quolumns left to right.
Dependencies: core/hex/layout.py.
"""

from typing import Iterable, List

from core.hex.layout import CellDefinition


def draw_order_key(cell: CellDefinition):
    # r descending, q ascending
    return (-cell.r, cell.q)


def ordered_cells(cells: Iterable[CellDefinition]) -> List[CellDefinition]:
    """Sort cells into paint order. sorted() is stable, so exact ties keep source order."""
    return sorted(cells, key=draw_order_key)
