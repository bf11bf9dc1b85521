"""
DocScope - Client State & Normalization Layer for Scanned Document Processing

A client-side library for a document extraction backend:
- Document registry tracking uploads through Uploading -> Processing -> Complete
- Normalization of heterogeneous backend records into stable view models
- Detail and search controllers with stale-response supersession
"""

__version__ = "1.0.0"
__author__ = "DocScope Team"
