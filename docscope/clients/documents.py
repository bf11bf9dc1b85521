"""
Document service client: listing, upload and detail endpoints.

Usage:
    client = DocumentServiceClient("http://localhost:8000")
    listing = await client.list_documents()
    ack = await client.upload([UploadFile.from_path("scan.pdf")])
    detail = await client.get_document(listing["documents"][0]["document_id"])
"""

import logging
from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

import aiohttp

from docscope.shared.exceptions import DecodeError
from docscope.shared.models import UploadFile
from .base import ServiceClient, require_mapping

logger = logging.getLogger(__name__)


class DocumentServiceClient(ServiceClient):
    """Client for ``/api/documents`` and ``/api/upload``."""

    service_name = "document-service"

    async def list_documents(self) -> Dict[str, Any]:
        """``GET /api/documents``; returns the raw ``{documents: [...]}`` payload."""
        payload = require_mapping(
            self.service_name,
            await self._request_json("GET", "/api/documents"),
            "document listing",
        )
        documents = payload.get("documents")
        if documents is not None and not isinstance(documents, list):
            raise DecodeError(self.service_name, "documents is not a list")
        logger.info(f"Document service listed {len(documents or [])} documents")
        return payload

    async def upload(self, files: Sequence[UploadFile]) -> Dict[str, Any]:
        """
        ``POST /api/upload`` with one repeated ``files`` form field per file.

        The response is only an acknowledgment; the authoritative list is
        fetched again through list_documents().
        """
        form = aiohttp.FormData()
        for upload in files:
            form.add_field(
                "files",
                upload.content,
                filename=upload.name,
                content_type=upload.content_type,
            )
        payload = require_mapping(
            self.service_name,
            await self._request_json("POST", "/api/upload", data=form),
            "upload acknowledgment",
        )
        logger.info(f"Uploaded {len(files)} files")
        return payload

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        """``GET /api/documents/{id}``; returns the raw detail record."""
        return require_mapping(
            self.service_name,
            await self._request_json("GET", f"/api/documents/{quote(str(document_id), safe='')}"),
            "document detail",
        )


def create_document_client(settings=None, session: Optional[aiohttp.ClientSession] = None) -> DocumentServiceClient:
    """Create a document client from settings (or the environment)."""
    from docscope.core.config import get_settings

    settings = settings or get_settings()
    return DocumentServiceClient(settings.api_base_url, settings.request_timeout, session=session)
