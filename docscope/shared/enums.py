"""Shared enumerations for the registry, controllers and presentation helpers."""

from enum import Enum


class DocumentStatus(str, Enum):
    """UI-facing lifecycle stage of a document."""
    UPLOADING = "Uploading"
    PROCESSING = "Processing"
    COMPLETE = "Complete"


class ServerStatusCode(str, Enum):
    """Status codes reported by the document service."""
    PROCESSED = "PROCESSED"
    UPLOADED = "UPLOADED"


class ProgressSource(str, Enum):
    """Who produced the current progress value of a document."""
    LOCAL_SIMULATED = "local-simulated"
    SERVER_CONFIRMED = "server-confirmed"


class EntityIcon(str, Enum):
    """Icon category for an extracted entity."""
    PERSON = "person"
    LOCATION = "location"
    DATE = "date"
    ORGANIZATION = "organization"
    IDENTIFIER = "identifier"
    DOCUMENT_TYPE = "document_type"
    SIGNATURE = "signature"
    GENERIC = "generic"


class DetailTab(str, Enum):
    """Result tabs of the document detail view."""
    SUMMARY = "Summary"
    TEXT = "Text"
    TABLES = "Tables"
    ENTITIES = "Entities"
