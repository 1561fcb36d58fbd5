"""
HexJSON Reference: N/A (nested lookups, e.g. "ward 2023 turnout").
Purpose: Tiered cache accessed via compound keys, loading missing branches on demand.
Dependencies: core/errors.py, asyncio.
Ext Hooks: Expiry per top-level branch.
Client Only: Data for the hex map's datasets.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from core.errors import TieredLookupMissError

logger = logging.getLogger(__name__)

TieredDataLoader = Callable[[str], Awaitable[Mapping[str, Any]]]
TieredKeySplitter = Callable[[str], List[str]]


def whitespace_splitter(key: str) -> List[str]:
    return key.strip().split()


class TieredCache:
    """
    Tiered cache, accessed via nested keys.

    ``lookup_one("a b c")`` descends the cached data as ``data["a"]["b"]["c"]``. On a
    miss the loader is awaited once with the original compound key, its result is
    merged into the top level, and the descent is retried once.

    There is limited checking of correctness, so it's up to the loader to return
    the right structure.
    """

    def __init__(self, loader: TieredDataLoader, splitter: Optional[TieredKeySplitter] = None):
        if loader is None:
            raise TypeError("No loader function provided")
        self._loader = loader
        self._splitter = splitter or whitespace_splitter
        self._data: Dict[str, Any] = {}

    async def _load(self, key: str):
        data = await self._loader(key)
        self._data = {**self._data, **data}

    def _get(self, levels: List[str]) -> Any:
        node: Any = self._data
        for level in levels:
            if not isinstance(node, Mapping) or level not in node:
                raise TieredLookupMissError(" ".join(levels), levels)
            node = node[level]
        return node

    async def lookup_one(self, key: str) -> Any:
        """Value for a compound key, loading once on a miss. A second miss is fatal."""
        levels = self._splitter(key)
        try:
            return self._get(levels)
        except TieredLookupMissError:
            logger.warning("Cache miss for %r. Fetching data.", key)

        await self._load(key)
        try:
            return self._get(levels)
        except TieredLookupMissError as e:
            raise TieredLookupMissError(key, levels) from e
