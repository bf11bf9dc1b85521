"""
DocScope - Test Configuration
=============================

Shared pytest fixtures for all tests.
"""

import asyncio
import random
import sys
from pathlib import Path
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Mock Data
# =============================================================================

@pytest.fixture
def listing_record():
    """One record of GET /api/documents."""
    return {
        "document_id": "doc-001",
        "document_name": "invoice_march",
        "file_extension": ".pdf",
        "created_timestamp": "2024-03-05T14:30:00",
        "status_code": "PROCESSED",
        "status_name": "Processed",
        "textract_accuracy": 0.9712,
        "segmentation_accuracy": 88.4567,
        "storage_path": "s3://bucket/doc-001.pdf",
        "file_type": "application/pdf",
    }


@pytest.fixture
def listing_payload(listing_record):
    """Full listing response with one document per status code."""
    uploaded = dict(listing_record, document_id="doc-002", document_name="lease",
                    status_code="UPLOADED", status_name="Uploaded")
    queued = dict(listing_record, document_id="doc-003", document_name="passport",
                  file_extension=".png", status_code="QUEUED", status_name="Queued",
                  textract_accuracy=None, segmentation_accuracy=None)
    return {"documents": [listing_record, uploaded, queued]}


@pytest.fixture
def detail_record():
    """Record of GET /api/documents/{id} using the nested paths."""
    return {
        "document_id": "doc-001",
        "segmentation_accuracy": 0.8456,
        "document_summary": "Invoice from Acme Corp for March services.",
        "segmentation_output": {
            "confidence_scores": {"document_scores": {"layout_score": 0.9321}},
            "metadata": {
                "num_pages": 3,
                "additional_info": {"markdown": "# Invoice\n\nTotal: 1,200"},
            },
            "extracted_text": "Invoice Total 1200",
            "tables_data": [
                {
                    "data": [
                        {"Item": "Consulting", "Amount": "1000"},
                        {"Item": "Travel"},
                    ],
                    "confidence": 0.91,
                }
            ],
            "entities": [{"type": "Ignored", "value": "nested list loses to top level"}],
        },
        "entities": [
            {"type": "Person", "value": "Jane Doe"},
            {"entity_type": "Organization", "text": "Acme"},
            {"type": "Date", "value": "2024-03-05"},
        ],
    }


@pytest.fixture
def search_payload():
    """Response of GET /api/search."""
    return {
        "results": [
            {
                "document_id": "doc-007",
                "document_name": "tax_return_2023",
                "created_timestamp": "2024-01-10T09:05:00",
                "document_summary": "Annual income statement and deductions.",
            },
            {
                "document_id": "doc-004",
                "document_name": "payslip",
                "created_timestamp": "2024-02-01T08:00:00",
                "document_summary": None,
            },
        ]
    }


# =============================================================================
# Collaborators
# =============================================================================

class GatedDocumentsClient:
    """
    Document client whose get_document() waits on a per-id gate.

    Lets a test decide in which order concurrent detail fetches resolve.
    """

    def __init__(self, payloads: Dict[str, Any]):
        self.payloads = payloads
        self.gates = {key: asyncio.Event() for key in payloads}
        self.calls = []

    async def get_document(self, document_id: str):
        self.calls.append(document_id)
        await self.gates[document_id].wait()
        payload = self.payloads[document_id]
        if isinstance(payload, Exception):
            raise payload
        return payload


class GatedSearchClient:
    """Search client whose search() waits on a per-query gate."""

    def __init__(self, payloads: Dict[str, Any]):
        self.payloads = payloads
        self.gates = {key: asyncio.Event() for key in payloads}

    async def search(self, query: str):
        await self.gates[query].wait()
        payload = self.payloads[query]
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture
def mock_documents_client(listing_payload, detail_record):
    """AsyncMock document client returning the sample payloads."""
    client = AsyncMock()
    client.list_documents.return_value = listing_payload
    client.upload.return_value = {"documents": [{"document_id": "doc-009"}]}
    client.get_document.return_value = detail_record
    return client


@pytest.fixture
def mock_search_client(search_payload):
    client = AsyncMock()
    client.search.return_value = search_payload
    return client


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


class MaxRandom(random.Random):
    """Random source always returning the upper bound of uniform()."""

    def uniform(self, a, b):
        return b


@pytest.fixture
def max_rng():
    return MaxRandom()


# =============================================================================
# aiohttp session mocks
# =============================================================================

def make_response(status: int = 200, json_data: Any = None, text: str = "", json_error: Exception = None):
    """Fake aiohttp response."""
    response = MagicMock()
    response.status = status
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    return response


def make_session(response=None, error: Exception = None):
    """Fake aiohttp.ClientSession whose request() yields ``response``."""
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    if error is not None:
        session.request.side_effect = error
        return session

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    # Must not suppress exceptions raised inside the block
    context.__aexit__ = AsyncMock(return_value=False)
    session.request.return_value = context
    return session


# =============================================================================
# Environment
# =============================================================================

@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
    """Set test environment variables and forget cached settings."""
    from docscope.core.config import get_settings

    monkeypatch.setenv("DOCSCOPE_API_BASE_URL", "http://docs.test:8000")
    monkeypatch.setenv("DOCSCOPE_SEARCH_URL", "http://search.test:8765")
    monkeypatch.setenv("DOCSCOPE_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("DOCSCOPE_PROGRESS_TICK_SECONDS", "0.01")
    monkeypatch.delenv("DOCSCOPE_MAX_TICK_INCREMENT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
