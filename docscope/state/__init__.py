"""
DocScope - Client State
=======================

Observable state objects driven by the presentation layer:
- registry.py: DocumentRegistry (document lifecycle and progress)
- detail.py: DetailFetchController (selected document detail)
- search.py: SearchController (query, results, searched flag)
- viewer.py: ViewerState (page, zoom, tab)
"""

from .observable import Observable
from .registry import DocumentRegistry
from .detail import DetailFetchController
from .search import SearchController
from .viewer import ViewerState

__all__ = [
    'Observable',
    'DocumentRegistry',
    'DetailFetchController',
    'SearchController',
    'ViewerState',
]
