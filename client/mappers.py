"""
HexJSON Reference: hex context fields (n = name).
Purpose: Default label, title and style mappers for a hex context.
Dependencies: core/config.py.
Ext Hooks: Colour scales over context["value"].
"""

from typing import Dict, Mapping

from core.config import DEFAULT_FILL, LABEL_LENGTH


def default_label(context: Mapping) -> str:
    """First few characters of the hex name."""
    return str(context.get("n", ""))[:LABEL_LENGTH]


def default_title(context: Mapping) -> str:
    return str(context.get("n", ""))


def default_style(context: Mapping) -> Dict[str, str]:
    return {"fill": DEFAULT_FILL}
