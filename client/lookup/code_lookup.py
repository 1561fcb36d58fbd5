"""
HexJSON Reference: N/A (code to label tables served next to the layouts).
Purpose: Simple lookup of code -> list of labels, merged from JSON documents.
Dependencies: client/network/client.py, core/errors.py, asyncio.
Ext Hooks: Reverse lookup (label -> codes).
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from client.network.client import NetworkClient
from core.errors import LayoutFetchError

logger = logging.getLogger(__name__)


class CodeLookup:
    def __init__(self, network: Optional[NetworkClient] = None):
        self.network = network or NetworkClient()
        self._lookup: Dict[str, List[str]] = {}

    async def load(self, urls: Iterable[str]):
        """Fetch each URL in turn and merge it in. Later documents win on clashing codes."""
        for url in urls:
            data = await asyncio.to_thread(self.network.get_json_with_retry, url)
            if data is None:
                raise LayoutFetchError(f"Could not retrieve lookup table {url}")
            self._lookup = {**self._lookup, **data}
            logger.debug("Merged %d codes from %s", len(data), url)

    def get(self, code: str) -> Optional[List[str]]:
        return self._lookup.get(code)

    def __len__(self):
        return len(self._lookup)
