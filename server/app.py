"""
HexJSON Reference: layouts and rendered maps over HTTP.
Purpose: Flask server for hex map layouts and server-side SVG.
Dependencies: flask, server/routes/map.py, core/config.py, core/logging_config.py.
Ext Hooks: Add dataset routes.
Client/Server: Server for layouts (client/hex_map.py fetches from here).
"""

import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flask import Flask

from core.config import LAYOUT_DIR
from core.logging_config import setup_logging
from server.routes.map import bp


def create_app(layout_dir=LAYOUT_DIR):
    app = Flask(__name__)
    app.config["LAYOUT_DIR"] = layout_dir
    app.register_blueprint(bp)
    return app


app = create_app()

if __name__ == "__main__":
    setup_logging()
    app.run(debug=True)
