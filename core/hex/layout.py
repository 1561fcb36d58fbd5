"""
HexJSON Reference: https://odileeds.org/projects/hexmaps/hexjson (layout + hexes).
Purpose: Parse and validate a HexJSON layout into cell definitions.
Dependencies: core/errors.py, json.
Ext Hooks: Accept other layout sources (CSV, GeoJSON centroids).
Client/Server: Shared; the client loads fetched layouts, the server validates posted ones.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from core.errors import FormatError

logger = logging.getLogger(__name__)

Context = Dict[str, Union[str, int, float]]


@dataclass
class CellDefinition:
    """
    One hex of the layout.
    - key: identity used for dataset lookup (unique within the document).
    - q, r: axial coordinates.
    - context: every field of the hex definition, plus ``key``; handed to the mappers.
    """
    key: str
    q: int
    r: int
    context: Context = field(default_factory=dict)


@dataclass
class LayoutDocument:
    layout_mode: str
    cells: Dict[str, CellDefinition] = field(default_factory=dict)

    def __len__(self):
        return len(self.cells)


def _reject_duplicates(pairs):
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise FormatError(f"Duplicate key {key!r} in layout document")
        obj[key] = value
    return obj


def _coordinate(key, name, value) -> int:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatError(f"Hex {key!r}: coordinate {name!r} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise FormatError(f"Hex {key!r}: coordinate {name!r} must be an integer, got {value!r}")
        value = int(value)
    return value


def _cell(key: str, definition: Any) -> CellDefinition:
    if not isinstance(definition, Mapping):
        raise FormatError(f"Hex {key!r} must be an object")
    for name in ("q", "r"):
        if name not in definition:
            raise FormatError(f"Hex {key!r} is missing coordinate {name!r}")
    q = _coordinate(key, "q", definition["q"])
    r = _coordinate(key, "r", definition["r"])

    context: Context = {"key": key}
    for name, value in definition.items():
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise FormatError(f"Hex {key!r}: field {name!r} must be a string or number")
        context[name] = value
    context["q"] = q
    context["r"] = r
    return CellDefinition(key=key, q=q, r=r, context=context)


def load(source: Union[str, bytes, Mapping]) -> LayoutDocument:
    """Build a LayoutDocument from JSON text or an already-decoded mapping."""
    if isinstance(source, (str, bytes, bytearray)):
        try:
            source = json.loads(source, object_pairs_hook=_reject_duplicates)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FormatError(f"Layout is not valid JSON: {e}") from e

    if not isinstance(source, Mapping):
        raise FormatError("Not a HexJSON layout")
    layout_mode = source.get("layout")
    if not isinstance(layout_mode, str):
        raise FormatError("HexJSON layout is missing the 'layout' token")
    hexes = source.get("hexes")
    if not isinstance(hexes, Mapping):
        raise FormatError("HexJSON layout is missing the 'hexes' mapping")

    cells = {}
    for key, definition in hexes.items():
        key = str(key)
        if key in cells:
            raise FormatError(f"Duplicate hex key {key!r}")
        cells[key] = _cell(key, definition)

    logger.debug("Loaded layout %r with %d hexes", layout_mode, len(cells))
    return LayoutDocument(layout_mode=layout_mode, cells=cells)


def load_file(path) -> LayoutDocument:
    """Read a .hexjson file from disk."""
    return load(Path(path).read_bytes())
