"""
HexJSON Reference: layouts served as <name>.hexjson.
Purpose: Serve layouts and render bound hex maps as SVG server-side.
Dependencies: core/hex/*, client/render/svg_renderer.py, client/binding.py, core/config.py, flask.
Ext Hooks: Cache rendered SVG per (layout, dataset) hash.
Server Only: Validation and rendering; no client state.
"""
import logging
import os

from flask import Blueprint, Response, current_app, jsonify, request

from client.binding import DataBinder
from client.render.svg_renderer import SvgRenderer
from core.config import HEX_SIZE
from core.errors import EmptyLayoutError, FormatError
from core.hex.grid import GridMetrics
from core.hex.layout import load, load_file
from core.hex.order import ordered_cells

logger = logging.getLogger(__name__)

bp = Blueprint('map', __name__)


@bp.route("/api/layouts/<name>", methods=["GET"])
def get_layout(name):
    layout_dir = current_app.config["LAYOUT_DIR"]
    path = os.path.join(layout_dir, f"{os.path.basename(name)}.hexjson")
    if not os.path.isfile(path):
        return jsonify({"error": f"Unknown layout {name}"}), 404
    try:
        document = load_file(path)
    except FormatError as e:
        logger.error("Layout %s is invalid: %s", path, e)
        return jsonify({"error": str(e)}), 400

    hexes = {key: {k: v for k, v in cell.context.items() if k != "key"}
             for key, cell in document.cells.items()}
    return jsonify({"layout": document.layout_mode, "hexes": hexes})


@bp.route("/api/hexmap", methods=["POST"])
def render_hexmap():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'layout' not in data:
        return jsonify({"error": "Invalid data"}), 400

    try:
        document = load(data["layout"])
        metrics = GridMetrics.from_layout(document, float(data.get('size', HEX_SIZE)))
    except (FormatError, EmptyLayoutError, TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400

    dataset = data.get("data") or {}
    if not isinstance(dataset, dict):
        return jsonify({"error": "data must be an object keyed by hex"}), 400

    renderer = SvgRenderer(metrics)
    cells = renderer.render(ordered_cells(document.cells.values()))
    if dataset:
        DataBinder().bind(cells, dataset)
    return Response(renderer.tostring(), mimetype="image/svg+xml")
