"""
HexJSON Reference: dataset keyed like the layout's hexes ({key: {count, value}}).
Purpose: Re-bind a dataset onto already rendered hexes (context, tooltip, style).
Dependencies: client/render/svg_renderer.py, client/mappers.py, core/errors.py.
Ext Hooks: Bind extra numeric fields beyond count/value.
Client Only: Mutates the render tree; never creates or removes hexes.
"""

import logging
from typing import List, Mapping, Optional

from client.mappers import default_style, default_title
from client.render.svg_renderer import RenderedCell
from core.errors import DeferredBindError

logger = logging.getLogger(__name__)

BOUND_FIELDS = ("count", "value")


def dataset_entry(dataset: Mapping, key: str):
    """(count, value) for a hex; missing keys, fields or malformed entries give 0."""
    entry = dataset.get(key) if dataset else None
    if not isinstance(entry, Mapping):
        entry = {}
    return tuple(entry.get(name, 0) for name in BOUND_FIELDS)


class DataBinder:
    def __init__(self, title_spec=default_title, style_spec=default_style):
        self.title_spec = title_spec
        self.style_spec = style_spec

    def bind(self, cells: Optional[List[RenderedCell]], dataset: Mapping) -> int:
        """Apply dataset to every rendered cell. Returns the number of cells bound."""
        if cells is None:
            raise DeferredBindError("Hex map not rendered yet")

        # Evaluate every mapper first so a failing mapper leaves the tree untouched
        staged = []
        for cell in cells:
            count, value = dataset_entry(dataset, cell.key)
            context = {**cell.context, "count": count, "value": value}
            title = self.title_spec(context)
            style = dict(self.style_spec(context))
            staged.append((cell, count, value, title, style))

        for cell, count, value, title, style in staged:
            cell.apply(count, value, title, style)

        missing = [c.key for c in cells if c.key not in (dataset or {})]
        if missing:
            logger.debug("%d hexes have no data; defaulted to 0", len(missing))
        return len(staged)
