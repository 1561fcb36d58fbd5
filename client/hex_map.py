"""
HexJSON Reference: hex map component (layout attribute + data property).
Purpose: Own one hex map - load layout, render once, re-bind on every dataset event.
Dependencies: core/hex/*, client/render/svg_renderer.py, client/binding.py,
    client/network/client.py, core/config.py, core/errors.py, asyncio.
Ext Hooks: Click/hover callbacks per hex key.
Client Only: The render tree is owned here and only mutated by the binder.

Lifecycle: UNLOADED -> LOADING -> READY -> BOUND (re-entered on every dataset),
LOADING -> ERROR on any failure before the first paint, and any state -> CLOSED on teardown.
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from client.binding import DataBinder
from client.mappers import default_label, default_style, default_title
from client.network.client import NetworkClient
from client.render.svg_renderer import RenderedCell, SvgRenderer
from core.config import BIND_BACKOFF_FACTOR, BIND_MAX_DELAY, BIND_RETRY_DELAY, HEX_SIZE
from core.errors import ComponentStateError, DeferredBindError, LayoutFetchError
from core.hex.grid import GridMetrics
from core.hex.layout import LayoutDocument, load, load_file
from core.hex.order import ordered_cells

logger = logging.getLogger(__name__)

Dataset = Mapping[str, Mapping[str, float]]


class HexMapState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    BOUND = "bound"
    ERROR = "error"
    CLOSED = "closed"


class HexMap:
    """
    A hex map built from a HexJSON layout, with a dataset bound onto it.

    ``layout`` is a URL, a file path or an already decoded HexJSON mapping. Datasets
    arrive as events through ``update_data``; one that arrives before the map is
    rendered is held and bound as soon as rendering completes.
    """

    def __init__(self, layout: Union[str, Mapping], size: float = HEX_SIZE,
                 data: Optional[Dataset] = None, label_spec=default_label,
                 title_spec=default_title, style_spec=default_style,
                 network: Optional[NetworkClient] = None,
                 retry_delay: float = BIND_RETRY_DELAY,
                 backoff_factor: float = BIND_BACKOFF_FACTOR,
                 max_delay: float = BIND_MAX_DELAY):
        self.layout_source = layout
        self.size = size
        self.label_spec = label_spec
        self.title_spec = title_spec
        self.style_spec = style_spec
        self.network = network or NetworkClient()
        self.retry_delay = retry_delay
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay

        self.state = HexMapState.UNLOADED
        self.document: Optional[LayoutDocument] = None
        self.metrics: Optional[GridMetrics] = None
        self.renderer: Optional[SvgRenderer] = None

        self._data: Optional[Dataset] = data
        self._bound_data: Optional[Dataset] = None
        self._ready: Optional[asyncio.Event] = None
        self._pending: Set[asyncio.Task] = set()

    # -- layout -----------------------------------------------------------

    async def _fetch_layout(self) -> LayoutDocument:
        source = self.layout_source
        if isinstance(source, Mapping):
            return load(source)
        if source.startswith(("http://", "https://")):
            text = await asyncio.to_thread(self.network.get_text_with_retry, source)
            if text is None:
                raise LayoutFetchError(f"Could not retrieve layout from {source}")
            return load(text)
        try:
            return await asyncio.to_thread(load_file, source)
        except OSError as e:
            raise LayoutFetchError(f"Could not read layout {source}: {e}") from e

    async def connect(self) -> List[RenderedCell]:
        """Load the layout and paint the initial map. The only suspension point is the fetch."""
        if self.state is not HexMapState.UNLOADED:
            raise ComponentStateError(f"Cannot connect a hex map in state {self.state.value}")
        self.state = HexMapState.LOADING
        logger.debug("Loading layout %r", self.layout_source)

        try:
            document = await self._fetch_layout()
            metrics = GridMetrics.from_layout(document, self.size)
            if self.state is HexMapState.CLOSED:
                logger.debug("Hex map closed during load; discarding layout")
                return []
            renderer = SvgRenderer(metrics, self.label_spec, self.title_spec, self.style_spec)
            cells = renderer.render(ordered_cells(document.cells.values()))
        except Exception as e:
            # Any failure before the first paint is terminal
            if self.state is HexMapState.LOADING:
                self.state = HexMapState.ERROR
                self._cancel_pending()
            logger.error("Hex map layout failed: %s", e)
            raise

        self.document, self.metrics, self.renderer = document, metrics, renderer
        self.state = HexMapState.READY
        logger.info("Hex map ready with %d hexes", len(cells))

        self._ready_event().set()
        if self._data is not None:
            self._bind_latest()
        return cells

    @property
    def hexes(self) -> List[Dict[str, Any]]:
        """Layout hexes in draw order, each with its key merged in."""
        if self.document is None:
            raise ComponentStateError("HexJSON layout not loaded")
        return [dict(cell.context) for cell in ordered_cells(self.document.cells.values())]

    @property
    def cells(self) -> Optional[List[RenderedCell]]:
        return self.renderer.cells if self.renderer is not None else None

    # -- data -------------------------------------------------------------

    @property
    def data(self) -> Optional[Dataset]:
        return self._data

    def update_data(self, dataset: Optional[Dataset]) -> Optional[asyncio.Task]:
        """
        Deliver a new dataset. Binds immediately when rendered; otherwise schedules a
        deferred bind (returned) which binds whatever dataset is latest once ready.
        """
        if self.state in (HexMapState.CLOSED, HexMapState.ERROR):
            logger.debug("Ignoring dataset for hex map in state %s", self.state.value)
            return None
        self._data = dataset
        if dataset is None:
            return None
        try:
            self.bind(dataset)
            return None
        except DeferredBindError:
            return self._schedule_deferred_bind()

    def set_data_json(self, text: str) -> Optional[asyncio.Task]:
        return self.update_data(json.loads(text))

    def bind(self, dataset: Dataset) -> int:
        """Bind a dataset synchronously. Raises DeferredBindError before rendering."""
        if self.state is HexMapState.CLOSED:
            return 0
        binder = DataBinder(self.title_spec, self.style_spec)
        count = binder.bind(self.cells, dataset)
        self._bound_data = dataset
        self.state = HexMapState.BOUND
        return count

    def _bind_latest(self):
        if self._data is None or self._data is self._bound_data:
            return
        self.bind(self._data)

    def _schedule_deferred_bind(self) -> Optional[asyncio.Task]:
        for task in self._pending:
            if not task.done():
                return task
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: connect() binds the held dataset after rendering
            return None
        task = loop.create_task(self._deferred_bind())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deferred_bind(self):
        delay = self.retry_delay
        while True:
            if self.state in (HexMapState.CLOSED, HexMapState.ERROR):
                return
            try:
                self._bind_latest()
                return
            except DeferredBindError:
                logger.warning("Hex map not rendered; retrying bind in %.2fs", delay)
            if not await self._wait_ready(delay):
                delay = min(delay * self.backoff_factor, self.max_delay)

    def _ready_event(self) -> asyncio.Event:
        # Created inside the running loop, never in __init__
        if self._ready is None:
            self._ready = asyncio.Event()
        return self._ready

    async def _wait_ready(self, timeout: float) -> bool:
        """True once rendered, False if timeout elapsed first."""
        try:
            await asyncio.wait_for(self._ready_event().wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    # -- output / teardown --------------------------------------------------

    def to_svg(self) -> str:
        if self.renderer is None:
            raise ComponentStateError("Hex map not rendered")
        return self.renderer.tostring()

    def _cancel_pending(self):
        for task in list(self._pending):
            task.cancel()

    def close(self):
        """Tear down. Pending deferred binds are cancelled and later ones do nothing."""
        self.state = HexMapState.CLOSED
        self._cancel_pending()
        logger.debug("Hex map closed")
