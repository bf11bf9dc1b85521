"""
DocScope - Service Client Base
==============================

Shared aiohttp plumbing for the document service and search service:
- Lazily created session with a total request timeout
- Request correlation IDs bound into the logging context
- Mapping of transport, status and decode failures onto the
  DocScopeClientError hierarchy

No request is retried; callers decide what a failure means.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from docscope.core.logging_config import generate_request_id, set_request_id
from docscope.shared.exceptions import DecodeError, ServiceError, TransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"accept": "application/json"}


class ServiceClient:
    """Base class for JSON-over-HTTP collaborators."""

    service_name = "service"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._request_count = 0

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        data: Any = None,
    ) -> Any:
        """
        Perform one request and decode its JSON body.

        Raises:
            TransportError: connection failure or timeout
            ServiceError: non-2xx status
            DecodeError: body is not JSON
        """
        session = await self._get_session()
        url = self._url(endpoint)
        request_id = generate_request_id()
        set_request_id(request_id)
        self._request_count += 1

        logger.debug(f"{self.service_name}: {method} {url}")

        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                headers=JSON_HEADERS,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status < 200 or response.status >= 300:
                    text = await response.text()
                    raise ServiceError(self.service_name, response.status, text[:200])
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise DecodeError(self.service_name, f"invalid JSON from {url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(self.service_name, f"timed out after {self.timeout}s: {url}") from e
        except aiohttp.ClientError as e:
            raise TransportError(self.service_name, f"{type(e).__name__}: {e}") from e
        finally:
            set_request_id(None)


def require_mapping(service: str, payload: Any, what: str) -> Dict[str, Any]:
    """Ensure a decoded payload is a JSON object."""
    if not isinstance(payload, dict):
        raise DecodeError(service, f"expected JSON object for {what}, got {type(payload).__name__}")
    return payload
