"""
Search service client.

The search service may be a separate deployment from the document
service, so it has its own base URL (DOCSCOPE_SEARCH_URL).
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from docscope.shared.exceptions import DecodeError, EmptyQuery
from .base import ServiceClient, require_mapping

logger = logging.getLogger(__name__)


class SearchServiceClient(ServiceClient):
    """Client for ``GET /api/search?q=``."""

    service_name = "search-service"

    async def search(self, query: str) -> Dict[str, Any]:
        """
        Execute a free-text search.

        Args:
            query: Search text; surrounding whitespace is stripped

        Returns:
            Raw ``{results: [...]}`` payload in service order

        Raises:
            EmptyQuery: query is blank
        """
        query = (query or "").strip()
        if not query:
            raise EmptyQuery("search query is empty")

        payload = require_mapping(
            self.service_name,
            await self._request_json("GET", "/api/search", params={"q": query}),
            "search response",
        )
        results = payload.get("results")
        if results is not None and not isinstance(results, list):
            raise DecodeError(self.service_name, "results is not a list")
        logger.info(f"Search for {query[:50]!r} returned {len(results or [])} results")
        return payload


def create_search_client(settings=None, session: Optional[aiohttp.ClientSession] = None) -> SearchServiceClient:
    """Create a search client from settings (or the environment)."""
    from docscope.core.config import get_settings

    settings = settings or get_settings()
    return SearchServiceClient(settings.search_url, settings.request_timeout, session=session)
