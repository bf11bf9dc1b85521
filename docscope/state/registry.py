"""
DocScope - Document Registry
============================

The in-memory authoritative collection of documents on the client.

All mutation goes through the operations below; derived values are
recomputed on every read. Two producers write progress:

- tick_progress(): local simulation, tags entries LOCAL_SIMULATED
- replace_all_from_server(): wholesale replace with SERVER_CONFIRMED
  entries; server truth always wins over simulated progress

Lifecycle per document is Uploading -> Processing -> Complete. The tick
never lowers progress and never touches a Complete entry.
"""

import logging
import math
import random
import time
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from docscope.presentation.helpers import format_file_size
from docscope.shared.enums import DocumentStatus, ProgressSource
from docscope.shared.models import Document, UploadFile
from docscope.shared.normalizer import format_timestamp, normalize_document_list
from .observable import Observable

logger = logging.getLogger(__name__)

MAX_TICK_INCREMENT = 15.0


class DocumentRegistry(Observable):
    """Owned, observable collection of Document entries."""

    def __init__(self, max_tick_increment: float = MAX_TICK_INCREMENT, rng: Optional[random.Random] = None):
        super().__init__()
        self._documents: List[Document] = []
        self.max_tick_increment = max(0.0, min(MAX_TICK_INCREMENT, max_tick_increment))
        self._rng = rng or random.Random()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _next_local_id(self, taken: set) -> str:
        stamp = int(time.time() * 1000)
        while f"local-{stamp}" in taken:
            stamp += 1
        return f"local-{stamp}"

    def add_pending(self, files: Iterable[UploadFile]) -> List[str]:
        """
        Register files about to be uploaded.

        Each file becomes an Uploading entry at progress 0, appended in
        submission order.

        Returns:
            Assigned registry ids, in the same order as ``files``
        """
        taken = {doc.id for doc in self._documents}
        uploaded_at = format_timestamp(datetime.now())
        ids = []
        for upload in files:
            doc_id = self._next_local_id(taken)
            taken.add(doc_id)
            self._documents.append(Document(
                id=doc_id,
                name=upload.name,
                size=format_file_size(upload.size),
                uploaded_at=uploaded_at,
                status=DocumentStatus.UPLOADING,
                progress=0.0,
                is_new=True,
                source=ProgressSource.LOCAL_SIMULATED,
            ))
            ids.append(doc_id)

        logger.info(f"Registered {len(ids)} pending uploads")
        self._notify()
        return ids

    def replace_all_from_server(self, raw_list: Any) -> None:
        """
        Replace the registry contents with a full listing response.

        Last writer wins: optimistic local entries are not merged with
        server truth.
        """
        documents = normalize_document_list(raw_list)
        seen = set()
        unique = []
        for index, doc in enumerate(documents):
            if not doc.id:
                # Records without an id are kept; server_id stays None
                doc.id = f"server-missing-{index}"
            if doc.id in seen:
                logger.warning(f"Duplicate document id {doc.id!r} in listing, keeping first")
                continue
            seen.add(doc.id)
            unique.append(doc)

        self._documents = unique
        logger.info(f"Registry replaced from server: {len(unique)} documents")
        self._notify()

    def remove(self, document_id: str) -> None:
        """Delete one entry; no-op if absent."""
        remaining = [doc for doc in self._documents if doc.id != document_id]
        if len(remaining) == len(self._documents):
            return
        self._documents = remaining
        self._notify()

    def clear(self) -> None:
        """Empty the registry."""
        self._documents = []
        self._notify()

    def tick_progress(self, rng: Optional[random.Random] = None) -> int:
        """
        Advance simulated progress of every unfinished entry.

        Each entry below 100 advances by a random step of at most
        max_tick_increment, clamped to 100. It becomes Complete exactly when
        it reaches 100, otherwise Processing.

        Returns:
            Number of entries advanced
        """
        rng = rng or self._rng
        advanced = 0
        for doc in self._documents:
            if doc.progress >= 100.0:
                continue
            step = rng.uniform(0.0, self.max_tick_increment)
            doc.progress = min(100.0, doc.progress + step)
            doc.status = DocumentStatus.COMPLETE if doc.progress >= 100.0 else DocumentStatus.PROCESSING
            doc.source = ProgressSource.LOCAL_SIMULATED
            doc.status_label = None
            advanced += 1

        if advanced:
            self._notify()
        return advanced

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def documents(self) -> List[Document]:
        """Entries in registry order (a new list; entries are shared)."""
        return list(self._documents)

    def get(self, document_id: str) -> Optional[Document]:
        for doc in self._documents:
            if doc.id == document_id:
                return doc
        return None

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self):
        return iter(list(self._documents))

    def total(self) -> int:
        return len(self._documents)

    def newly_added_count(self) -> int:
        return sum(1 for doc in self._documents if doc.is_new)

    def overall_progress(self) -> int:
        """Mean progress of all entries, rounded; 0 when empty."""
        if not self._documents:
            return 0
        mean = sum(doc.progress for doc in self._documents) / len(self._documents)
        # Half-up, not banker's rounding
        return int(math.floor(mean + 0.5))

    def count_by_status(self) -> Dict[DocumentStatus, int]:
        counts = Counter(doc.status for doc in self._documents)
        return {status: counts.get(status, 0) for status in DocumentStatus}

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot for the presentation layer."""
        return {
            'documents': [doc.to_dict() for doc in self._documents],
            'total': self.total(),
            'newly_added': self.newly_added_count(),
            'overall_progress': self.overall_progress(),
        }
