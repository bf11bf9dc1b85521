"""
DocScope - Search Controller
============================

Issues queries against the search service and keeps the tri-state the
results view renders: not searched yet, searched with results, searched
with no results.

Responses are gated by a sequence number exactly like detail fetches:
an older query resolving after a newer one is discarded.

Failures are folded into an empty result list. Unlike a confirmed
zero-match answer, a failed search also records ``outcome.error``.
"""

import logging
from typing import List, Optional

from docscope.shared.exceptions import DocScopeClientError, EmptyQuery, NormalizationError
from docscope.shared.models import SearchOutcome, SearchResult
from docscope.shared.normalizer import normalize_search_results
from .observable import Observable

logger = logging.getLogger(__name__)


class SearchController(Observable):
    """Owns the current query, its outcome and the searched/searching flags."""

    def __init__(self, search_client):
        super().__init__()
        self._client = search_client
        self._sequence = 0
        self.query: str = ""
        self.searching: bool = False
        self.searched: bool = False
        self.outcome: SearchOutcome = SearchOutcome()

    @property
    def results(self) -> List[SearchResult]:
        return self.outcome.results

    @property
    def error(self) -> Optional[str]:
        return self.outcome.error

    async def search(self, query: str) -> SearchOutcome:
        """
        Run a search; blank queries are ignored.

        Returns:
            The outcome now held by the controller
        """
        if not (query or "").strip():
            logger.debug("Ignoring empty search query")
            return self.outcome

        self._sequence += 1
        sequence = self._sequence
        self.query = query
        self.searching = True
        self._notify()

        try:
            payload = await self._client.search(query)
            outcome = SearchOutcome(query=query, results=normalize_search_results(payload))
            if outcome.is_empty:
                logger.info(f"Search for {query[:50]!r} returned no results")
        except EmptyQuery:
            logger.debug("Search service rejected empty query")
            outcome = SearchOutcome(query=query)
        except (DocScopeClientError, NormalizationError) as e:
            logger.warning(f"Search for {query[:50]!r} failed ({type(e).__name__}): {e}")
            outcome = SearchOutcome(query=query, error=str(e))

        if sequence != self._sequence:
            logger.debug(f"Discarding stale results for {query[:50]!r}")
            return self.outcome

        self.outcome = outcome
        self.searching = False
        self.searched = True
        self._notify()
        return self.outcome

    def reset(self) -> None:
        """Forget query, results and the searched flag."""
        self._sequence += 1
        self.query = ""
        self.searching = False
        self.searched = False
        self.outcome = SearchOutcome()
        self._notify()
