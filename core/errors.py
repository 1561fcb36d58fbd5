"""
HexJSON Reference: N/A (error model).
Purpose: Exceptions raised across layout loading, geometry, binding and lookups.
Dependencies: None.
Ext Hooks: Map to HTTP status codes in server/routes/map.py.
"""


class HexMapError(Exception):
    """Base class for every error raised by the hex map packages."""


class FormatError(HexMapError, ValueError):
    """Layout document is malformed or missing required fields."""


class EmptyLayoutError(HexMapError, ValueError):
    """Layout has no cells, so no bounds can be computed."""


class DeferredBindError(HexMapError):
    """Bind attempted before the render tree exists. Retried, never surfaced."""


class LayoutFetchError(HexMapError):
    """Layout document could not be retrieved."""


class ComponentStateError(HexMapError, RuntimeError):
    """Operation not allowed in the component's current lifecycle state."""


class TieredLookupMissError(HexMapError, KeyError):
    """Compound key still missing after one load-and-merge attempt."""

    def __init__(self, key, levels):
        super().__init__(key)
        self.key = key
        self.levels = levels

    def __str__(self):
        return f"No cached value for {self.key!r} (levels {self.levels})"


class UninitializedStorageError(HexMapError, LookupError):
    """Session key read before it was ever written."""
