"""
DocScope - Workspace
====================

Wires the registry, the controllers and the service clients together and
runs the periodic simulated-progress tick.

Usage:
    from docscope.core import configure_logging
    from docscope.workspace import DocumentWorkspace

    configure_logging()
    async with DocumentWorkspace.from_settings() as workspace:
        await workspace.refresh()
        workspace.ticker.start()
        await workspace.upload([UploadFile.from_path("scan.pdf")])
        await workspace.open_document(workspace.registry.documents()[0])
        await workspace.search.search("income")

Listing/upload, detail and search failures are logged and turned into
"unchanged registry", "no detail" and "empty results" respectively.
"""

import asyncio
import logging
import random
from typing import List, Optional, Sequence

from docscope.clients.documents import DocumentServiceClient, create_document_client
from docscope.clients.search import SearchServiceClient, create_search_client
from docscope.core.config import Settings, get_settings
from docscope.shared.exceptions import DocScopeClientError, NormalizationError
from docscope.shared.models import DetailState, Document, UploadFile
from docscope.state.detail import DetailFetchController
from docscope.state.registry import DocumentRegistry
from docscope.state.search import SearchController
from docscope.state.viewer import ViewerState

logger = logging.getLogger(__name__)


class ProgressTicker:
    """Background task calling registry.tick_progress() at a fixed interval."""

    def __init__(self, registry: DocumentRegistry, interval: float = 1.0):
        self.registry = registry
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def _tick_loop(self):
        logger.debug(f"Progress ticker started (interval={self.interval}s)")

        while self._running:
            try:
                await asyncio.sleep(self.interval)
                self.registry.tick_progress()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in progress ticker: {e}", exc_info=True)

        logger.debug("Progress ticker stopped")

    def start(self):
        """Start ticking; must be called from a running event loop."""
        if self._running:
            logger.warning("Progress ticker already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._tick_loop())

    async def stop(self):
        """Stop ticking and wait for the task to finish."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


class DocumentWorkspace:
    """
    Client-side state for one user session.

    Owns exactly one registry, detail controller, search controller and
    viewer; the presentation layer subscribes to them and calls the
    operations below.
    """

    def __init__(
        self,
        documents_client: DocumentServiceClient,
        search_client: SearchServiceClient,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or get_settings()
        self.documents_client = documents_client
        self.search_client = search_client

        self.registry = DocumentRegistry(
            max_tick_increment=self.settings.max_tick_increment,
            rng=rng,
        )
        self.detail = DetailFetchController(documents_client)
        self.search = SearchController(search_client)
        self.viewer = ViewerState()
        self.ticker = ProgressTicker(self.registry, self.settings.progress_tick_seconds)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'DocumentWorkspace':
        """Build a workspace with clients for the configured services."""
        settings = settings or get_settings()
        return cls(
            documents_client=create_document_client(settings),
            search_client=create_search_client(settings),
            settings=settings,
        )

    # -------------------------------------------------------------------------
    # Listing and upload
    # -------------------------------------------------------------------------

    async def refresh(self) -> bool:
        """
        Replace the registry with the server listing.

        Returns:
            True if the registry was replaced; on failure it keeps its
            last known contents
        """
        try:
            payload = await self.documents_client.list_documents()
            self.registry.replace_all_from_server(payload)
        except (DocScopeClientError, NormalizationError) as e:
            logger.warning(f"Document refresh failed ({type(e).__name__}): {e}")
            return False
        return True

    async def upload(self, files: Sequence[UploadFile]) -> List[str]:
        """
        Register files as pending, submit them, then refresh from the server.

        Returns:
            Registry ids assigned to the pending entries
        """
        files = list(files)
        if not files:
            return []

        pending_ids = self.registry.add_pending(files)

        try:
            ack = await self.documents_client.upload(files)
        except DocScopeClientError as e:
            logger.warning(f"Upload of {len(files)} files failed ({type(e).__name__}): {e}")
            return pending_ids

        if ack.get("documents") is None:
            logger.warning("Upload acknowledged without documents, skipping refresh")
            return pending_ids

        await self.refresh()
        return pending_ids

    def remove(self, document_id: str) -> None:
        if self.detail.selected is not None and self.detail.selected.id == document_id:
            self.detail.clear()
        self.registry.remove(document_id)

    def clear(self) -> None:
        self.detail.clear()
        self.registry.clear()

    # -------------------------------------------------------------------------
    # Detail and search
    # -------------------------------------------------------------------------

    async def open_document(self, document: Document) -> DetailState:
        """Select a document: reset the viewer and fetch its detail."""
        self.viewer.reset()
        state = await self.detail.select_document(document)
        if state.detail is not None and self.detail.selected is document:
            self.viewer.set_page_count(state.detail.page_count)
        return state

    async def open_first(self) -> Optional[DetailState]:
        """Open the first registry entry, if any."""
        documents = self.registry.documents()
        if not documents:
            return None
        return await self.open_document(documents[0])

    def leave_results(self) -> None:
        """Navigating away from the results view forgets the search."""
        self.search.reset()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self):
        await self.ticker.stop()
        await self.documents_client.close()
        await self.search_client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
