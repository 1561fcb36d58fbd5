"""
HexJSON Reference: N/A (setup).
Purpose: Configs for hex sizing, bind retries and network access.
Dependencies: os.
Ext Hooks: Add per-map themes.
"""

import os

HEX_SIZE = 90
DEFAULT_FILL = "#333333"
LABEL_LENGTH = 3
FONT_SIZE = 40
PADDING_FACTOR = 1.5

# Deferred bind back-off (seconds)
BIND_RETRY_DELAY = 0.25
BIND_BACKOFF_FACTOR = 2.0
BIND_MAX_DELAY = 2.0

NETWORK_MAX_RETRIES = 3
NETWORK_RETRY_DELAY = 1.0
NETWORK_BACKOFF_FACTOR = 2.0
NETWORK_TIMEOUT = 5.0

SERVER_URL = "http://localhost:5000"
LAYOUT_DIR = os.environ.get("HEXMAP_LAYOUT_DIR", os.path.join(os.getcwd(), "layouts"))
