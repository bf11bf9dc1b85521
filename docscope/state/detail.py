"""
DocScope - Detail Fetch Controller
==================================

Retrieves the detail record of the selected document and keeps the
"currently viewed" DocumentDetail.

Supersession: every selection takes a new sequence number. A response is
committed only if its sequence number is still the latest, so a slow
response for a previously selected document is dropped instead of
replacing the detail of the newer selection.

Failures never propagate: the detail becomes None, loading is cleared,
and ``error`` carries a short description.
"""

import logging
from typing import Optional

from docscope.core.logging_config import bind_document
from docscope.shared.exceptions import DocScopeClientError, NormalizationError
from docscope.shared.models import DetailState, Document, DocumentDetail
from docscope.shared.normalizer import normalize_document_detail
from .observable import Observable

logger = logging.getLogger(__name__)


class DetailFetchController(Observable):
    """Owns the detail of the currently selected document."""

    def __init__(self, documents_client):
        super().__init__()
        self._client = documents_client
        self._sequence = 0
        self._state = DetailState()
        self._selected: Optional[Document] = None

    @property
    def state(self) -> DetailState:
        return self._state

    @property
    def detail(self) -> Optional[DocumentDetail]:
        return self._state.detail

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def selected(self) -> Optional[Document]:
        return self._selected

    def _commit(self, state: DetailState) -> None:
        self._state = state
        self._notify()

    def clear(self) -> None:
        """Drop the selection; any in-flight response will be discarded."""
        self._sequence += 1
        self._selected = None
        bind_document(None)
        self._commit(DetailState())

    async def select_document(self, document: Document) -> DetailState:
        """
        Select a document and fetch its detail.

        The previous detail is cleared immediately. Documents without a
        server id (still uploading) stay in the "no detail" state.

        Returns:
            The controller state after this call; if a newer selection
            superseded this one, that newer state is returned unchanged
        """
        self._sequence += 1
        sequence = self._sequence
        self._selected = document
        server_id = document.server_id

        if not server_id:
            logger.debug(f"Document {document.id!r} has no server id yet, no detail to fetch")
            self._commit(DetailState(document_id=None))
            return self._state

        bind_document(server_id)
        self._commit(DetailState(document_id=server_id, loading=True))

        try:
            raw = await self._client.get_document(server_id)
            detail = normalize_document_detail(raw, document)
        except (DocScopeClientError, NormalizationError) as e:
            if sequence != self._sequence:
                logger.debug(f"Discarding stale failure for {server_id!r}")
                return self._state
            logger.warning(f"Detail fetch failed for {server_id!r} ({type(e).__name__}): {e}")
            self._commit(DetailState(document_id=server_id, error=str(e)))
            return self._state

        if sequence != self._sequence:
            logger.debug(f"Discarding stale detail for {server_id!r}")
            return self._state

        logger.info(
            f"Detail loaded for {server_id!r}: {detail.page_count} pages, "
            f"{len(detail.tables)} tables, {len(detail.entities)} entities"
        )
        self._commit(DetailState(document_id=server_id, detail=detail))
        return self._state
