"""
DocScope - Service Clients
==========================

aiohttp clients for the two HTTP collaborators:
- documents.py: listing, upload and detail (DOCSCOPE_API_BASE_URL)
- search.py: free-text search (DOCSCOPE_SEARCH_URL)
"""

from .base import ServiceClient
from .documents import DocumentServiceClient, create_document_client
from .search import SearchServiceClient, create_search_client

__all__ = [
    'ServiceClient',
    'DocumentServiceClient',
    'SearchServiceClient',
    'create_document_client',
    'create_search_client',
]
