"""
DocScope - Test Suite
=====================

Structure:
    tests/
    ├── conftest.py              - Shared fixtures
    └── unit/                    - Unit tests (fast, no network)
        ├── test_normalizer.py   - Response normalization
        ├── test_registry.py     - Document registry
        ├── test_detail.py       - Detail fetch controller
        ├── test_search.py       - Search controller
        ├── test_helpers.py      - Presentation helpers
        ├── test_viewer.py       - Viewer state
        ├── test_clients.py      - aiohttp service clients
        ├── test_config.py       - Settings
        ├── test_workspace.py    - Workspace wiring
        └── test_logging_config.py - structlog setup

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/unit/test_registry.py -v
"""
