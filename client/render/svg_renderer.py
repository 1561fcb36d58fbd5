"""
HexJSON Reference: one <g class="hex"> per hex, clipped to a shared outline.
Purpose: Materialise the ordered hexes as an SVG tree with labels and tooltips.
Dependencies: core/hex/grid.py, client/mappers.py, core/config.py, svgwrite.
Ext Hooks: Extra layers (borders, legends) on top of the hex group.
Client/Server: Used by client/hex_map.py and by server/routes/map.py for server-side SVG.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import svgwrite
from svgwrite.base import BaseElement
from svgwrite.container import Group
from svgwrite.text import Text

from client.mappers import default_label, default_style, default_title
from core.config import FONT_SIZE
from core.hex.grid import GridMetrics
from core.hex.layout import CellDefinition

logger = logging.getLogger(__name__)

STYLESHEET = f"""
svg {{ background: #eee; image-rendering: optimizeQuality; }}
.hex {{ fill: #333; }}
.hex * {{ scale: 0.95; transition: 0.2s; }}
.hex:hover * {{ scale: 1; }}
.hex:hover use {{ stroke: #999; stroke-width: 20px; }}
.hex text {{
    fill: white;
    font-size: {FONT_SIZE}px;
    text-anchor: middle;
    transform: translateY({FONT_SIZE * 0.35}px);
    pointer-events: none;
}}
"""


def format_number(value) -> str:
    """Render 2.0 as "2" so data-value matches the dataset's own notation."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_style(style: Dict[str, str]) -> str:
    return "; ".join(f"{k}: {v}" for k, v in style.items())


class Tooltip(BaseElement):
    """<title> whose text is read at serialisation time, so rebinding can change it."""
    elementname = "title"

    def __init__(self, text, **extra):
        super().__init__(**extra)
        self.text = text

    def get_xml(self):
        xml = super().get_xml()
        xml.text = str(self.text)
        return xml


@dataclass
class RenderedCell:
    """A hex group plus the context it was rendered from (a back-reference, owned here)."""
    key: str
    x: float
    y: float
    context: Dict
    group: Group
    label: Text
    title: Tooltip
    style: Dict[str, str] = field(default_factory=dict)

    @property
    def data_value(self) -> Optional[str]:
        return self.group.attribs.get("data-value")

    def apply(self, count, value, title: str, style: Dict[str, str]):
        """Write bound fields. Identical inputs leave the element unchanged."""
        self.context["count"] = count
        self.context["value"] = value
        self.group["data-value"] = format_number(value)
        self.title.text = title
        self.style.update(style)
        if self.style:
            self.group["style"] = format_style(self.style)


class SvgRenderer:
    def __init__(self, metrics: GridMetrics, label_spec=default_label, title_spec=default_title,
                 style_spec=default_style):
        self.metrics = metrics
        self.label_spec = label_spec
        self.title_spec = title_spec
        self.style_spec = style_spec
        self.drawing = None
        self.cells: List[RenderedCell] = []

    def _new_drawing(self) -> svgwrite.Drawing:
        dwg = svgwrite.Drawing(size=("100%", "100%"), profile="full", debug=False)
        dwg["viewBox"] = " ".join(str(v) for v in self.metrics.view_box())
        dwg["preserveAspectRatio"] = "xMidYMid meet"

        # Shared outline, referenced by every hex and by the clip region
        dwg.defs.add(dwg.style(STYLESHEET))
        dwg.defs.add(dwg.path(d=self.metrics.outline_path(), id="hex"))
        clip = dwg.defs.add(dwg.clipPath(id="clip"))
        clip.add(dwg.use("#hex"))
        return dwg

    def _render_cell(self, dwg, cell: CellDefinition) -> RenderedCell:
        x, y = self.metrics.project(cell.q, cell.r)
        # Unbound hexes read as zero until the first dataset arrives
        context = {"count": 0, "value": 0, **cell.context}

        group = dwg.g(class_="hex")
        group["transform"] = f"translate({x} {y})"
        group["clip-path"] = "url(#clip)"
        group["tabindex"] = "0"
        group["data-key"] = cell.key

        hex_use = dwg.use("#hex")
        hex_use["clip-path"] = "url(#clip)"
        label = dwg.text(self.label_spec(context))
        title = Tooltip(self.title_spec(context), factory=dwg)

        group.add(hex_use)
        group.add(label)
        group.add(title)
        return RenderedCell(key=cell.key, x=x, y=y, context=context, group=group,
                            label=label, title=title)

    def render(self, ordered: Iterable[CellDefinition]) -> List[RenderedCell]:
        """Paint every hex once, in the given order, replacing any previous tree."""
        dwg = self._new_drawing()
        hexes = dwg.add(dwg.g())
        cells = []
        for cell in ordered:
            rendered = self._render_cell(dwg, cell)
            hexes.add(rendered.group)
            cells.append(rendered)

        self.drawing = dwg
        self.cells = cells
        logger.debug("Rendered %d hexes", len(cells))
        return cells

    def tostring(self) -> str:
        if self.drawing is None:
            raise RuntimeError("Nothing rendered yet")
        return self.drawing.tostring()
