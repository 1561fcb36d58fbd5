"""
HexJSON Reference: N/A (raster preview).
Purpose: Draw a rendered hex map onto a pygame surface, scaled to fit.
Dependencies: client/render/svg_renderer.py, core/hex/grid.py, core/config.py, pygame.
Ext Hooks: Draw labels with pygame.font.
Client Only: Visuals.
"""

import logging

import pygame

from client.render.svg_renderer import SvgRenderer
from core.config import DEFAULT_FILL
from core.hex.grid import hex_corners

logger = logging.getLogger(__name__)


def fill_colour(style):
    """pygame colour for a style map; unknown CSS colours fall back to the default fill."""
    value = style.get("fill", DEFAULT_FILL)
    try:
        return pygame.Color(value)
    except ValueError:
        logger.debug("Unsupported fill %r, using default", value)
        return pygame.Color(DEFAULT_FILL)


def draw_hex_map(surface, renderer: SvgRenderer, background=(238, 238, 238)):
    """Rasterise every rendered hex. Returns the scale used."""
    metrics = renderer.metrics
    vb_x, vb_y, vb_w, vb_h = metrics.view_box()
    scale = min(surface.get_width() / vb_w, surface.get_height() / vb_h)

    surface.fill(background)
    for cell in renderer.cells:
        cx = (cell.x - vb_x) * scale
        cy = (cell.y - vb_y) * scale
        points = hex_corners(cx, cy, metrics.size * scale, metrics.rotated)
        pygame.draw.polygon(surface, fill_colour(cell.style), points)
        pygame.draw.lines(surface, (0, 0, 0), True, points, 1)
    return scale
