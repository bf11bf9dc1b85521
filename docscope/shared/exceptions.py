"""Custom exceptions for the DocScope client."""

from typing import Optional


class DocScopeException(Exception):
    """Base exception for all DocScope errors."""
    pass


# Configuration and Validation Exceptions

class ConfigurationError(DocScopeException):
    """Error in configuration."""
    pass


class NormalizationError(DocScopeException):
    """Backend record is not a mapping and cannot be normalized."""
    pass


class EmptyQuery(DocScopeException):
    """Search query is blank after trimming."""
    pass


# Collaborator (HTTP) Exceptions

class DocScopeClientError(DocScopeException):
    """Base exception for failed calls to the document or search service."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class TransportError(DocScopeClientError):
    """Service unreachable or request timed out."""
    pass


class DecodeError(DocScopeClientError):
    """Response was not JSON or did not have the expected shape."""
    pass


class ServiceError(DocScopeClientError):
    """Service answered with a non-success status."""

    def __init__(self, service: str, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(service, f"error ({status_code}): {message or 'no body'}")
