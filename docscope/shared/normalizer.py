"""
Response normalization for document service and search service records.

Backend records are inconsistent: the same logical value may live under
several keys or nested paths, and scores arrive either as fractions
(0-1) or percentages (0-100). Every logical value here is resolved through
an ordered tuple of accessors in FIELD_PATHS; the first accessor yielding a
present value wins, otherwise a documented default applies.

A value is "present" when it is neither None nor an empty string.

All functions are pure.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .enums import DocumentStatus, ProgressSource, ServerStatusCode
from .exceptions import NormalizationError
from .models import (
    Document,
    DocumentDetail,
    Entity,
    ExtractedField,
    SearchResult,
    Table,
)

Accessor = Callable[[Mapping[str, Any]], Any]

DISPLAY_TIME_FORMAT = "%d/%m/%Y %H:%M"
DEFAULT_ACCURACY = 100.0
UNTITLED = "Untitled Document"
NO_SUMMARY = "No summary available."

# status_code -> (UI status, progress)
STATUS_TABLE: Dict[str, Tuple[DocumentStatus, float]] = {
    ServerStatusCode.PROCESSED.value: (DocumentStatus.COMPLETE, 100.0),
    ServerStatusCode.UPLOADED.value: (DocumentStatus.PROCESSING, 50.0),
}
DEFAULT_STATUS: Tuple[DocumentStatus, float] = (DocumentStatus.UPLOADING, 0.0)


# =============================================================================
# Field Path Resolution
# =============================================================================

def path(*keys: str) -> Accessor:
    """Accessor walking nested mappings; yields None when any hop is missing."""
    def access(record: Mapping[str, Any]) -> Any:
        current: Any = record
        for key in keys:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)
        return current
    access.__name__ = ".".join(keys)
    return access


def is_present(value: Any) -> bool:
    return value is not None and value != ""


def first_present(record: Mapping[str, Any], accessors: Iterable[Accessor], default: Any = None) -> Any:
    """Return the first present value produced by ``accessors``."""
    for accessor in accessors:
        value = accessor(record)
        if is_present(value):
            return value
    return default


FIELD_PATHS: Dict[str, Tuple[Accessor, ...]] = {
    # Listing records
    'document_id': (path('document_id'), path('id')),
    'document_name': (path('document_name'), path('name')),
    'file_extension': (path('file_extension'),),
    'created_timestamp': (path('created_timestamp'),),
    'status_code': (path('status_code'),),
    'status_name': (path('status_name'),),
    'extraction_accuracy': (path('textract_accuracy'),),
    'segmentation_accuracy': (path('segmentation_accuracy'),),
    'storage_path': (path('storage_path'),),
    'file_type': (path('file_type'),),

    # Detail records
    'layout_score': (
        path('segmentation_output', 'confidence_scores', 'document_scores', 'layout_score'),
    ),
    'page_count': (path('segmentation_output', 'metadata', 'num_pages'),),
    'summary': (path('document_summary'),),
    'extracted_text': (
        path('segmentation_output', 'metadata', 'additional_info', 'markdown'),
        path('segmentation_output', 'extracted_text'),
    ),
    'tables': (path('segmentation_output', 'tables_data'),),
    'entities': (
        path('entities'),
        path('segmentation_output', 'entities'),
        path('named_entities'),
    ),

    # Nested items
    'table_rows': (path('data'), path('rows')),
    'table_confidence': (path('confidence'),),
    'entity_category': (path('type'), path('entity_type')),
    'entity_value': (path('value'), path('text')),
}


def resolve(record: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Resolve a logical field by name through FIELD_PATHS."""
    return first_present(record, FIELD_PATHS[name], default)


# =============================================================================
# Scalar Normalization
# =============================================================================

def normalize_score(value: Any) -> float:
    """
    Express an accuracy or score on the 0-100 scale.

    Values below 1 are fractions and are multiplied by 100; anything else is
    already a percentage. Both are rounded to two decimals. Missing or
    non-numeric input yields 0.0.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number < 1:
        number *= 100
    return round(number, 2)


def format_timestamp(value: Any) -> str:
    """Render an ISO timestamp as dd/mm/YYYY HH:MM; unparseable input is returned as text."""
    if not is_present(value):
        return ""
    if isinstance(value, datetime):
        return value.strftime(DISPLAY_TIME_FORMAT)
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text
    return parsed.strftime(DISPLAY_TIME_FORMAT)


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"{what} must be a mapping, got {type(raw).__name__}")
    return raw


# =============================================================================
# Listing Records
# =============================================================================

def status_from_code(status_code: Optional[str]) -> Tuple[DocumentStatus, float]:
    """Map a server status code to (UI status, progress)."""
    if not isinstance(status_code, str):
        return DEFAULT_STATUS
    return STATUS_TABLE.get(status_code, DEFAULT_STATUS)


def normalize_document_summary(raw: Mapping[str, Any]) -> Document:
    """Map one record of ``GET /api/documents`` to a registry Document."""
    raw = _require_mapping(raw, "document record")
    status, progress = status_from_code(resolve(raw, 'status_code'))
    document_id = str(resolve(raw, 'document_id', ""))
    extension = resolve(raw, 'file_extension', "")

    return Document(
        id=document_id,
        server_id=document_id or None,
        name=f"{resolve(raw, 'document_name', '')}{extension}",
        size="-",
        uploaded_at=format_timestamp(resolve(raw, 'created_timestamp')),
        status=status,
        progress=progress,
        status_label=resolve(raw, 'status_name'),
        # Zero accuracy is treated as unreported
        extraction_accuracy=normalize_score(resolve(raw, 'extraction_accuracy') or DEFAULT_ACCURACY),
        segmentation_accuracy=normalize_score(resolve(raw, 'segmentation_accuracy') or DEFAULT_ACCURACY),
        is_new=False,
        source=ProgressSource.SERVER_CONFIRMED,
        storage_path=resolve(raw, 'storage_path'),
        file_type=resolve(raw, 'file_type'),
    )


def normalize_document_list(payload: Any) -> List[Document]:
    """Normalize a full listing response ``{documents: [...]}`` or a bare list."""
    if isinstance(payload, Mapping):
        records = payload.get('documents') or []
    else:
        records = payload or []
    if not isinstance(records, list):
        raise NormalizationError("documents must be a list")
    return [normalize_document_summary(record) for record in records]


# =============================================================================
# Detail Records
# =============================================================================

def normalize_entity(raw: Any) -> Entity:
    """Resolve category and value; entities without either are kept with blanks."""
    if not isinstance(raw, Mapping):
        return Entity(category="", value="" if raw is None else str(raw))
    return Entity(
        category=str(resolve(raw, 'entity_category', "")),
        value=str(resolve(raw, 'entity_value', "")),
    )


def normalize_table(raw: Any) -> Table:
    """Normalize one entry of ``tables_data``."""
    if isinstance(raw, list):
        rows, confidence = raw, None
    elif isinstance(raw, Mapping):
        rows = resolve(raw, 'table_rows', [])
        confidence = resolve(raw, 'table_confidence')
    else:
        return Table()

    if not isinstance(rows, list):
        rows = []
    try:
        confidence = float(confidence) if confidence is not None else None
    except (TypeError, ValueError):
        confidence = None
    return Table(
        rows=[dict(row) for row in rows if isinstance(row, Mapping)],
        confidence=confidence,
    )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _page_count(value: Any) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def placeholder_summary(name: str) -> str:
    return f'This document "{name}" has been processed.'


def extracted_fields(document: Optional[Document]) -> List[ExtractedField]:
    """Side-panel metadata for a registry document."""
    if document is None:
        return []
    return [
        ExtractedField("Document Type", document.file_type or "PDF"),
        ExtractedField("Status", document.display_status or "Unknown"),
        ExtractedField("Upload Time", document.uploaded_at or "N/A"),
        ExtractedField("Document ID", document.server_id or "N/A"),
    ]


def normalize_document_detail(raw: Mapping[str, Any], fallback_document: Optional[Document] = None) -> DocumentDetail:
    """
    Map a ``GET /api/documents/{id}`` record to a DocumentDetail.

    Args:
        raw: Detail record as returned by the document service
        fallback_document: Registry entry the detail belongs to; supplies the
            display name, the extraction accuracy and a fallback
            segmentation accuracy

    Returns:
        DocumentDetail with every score on the 0-100 scale
    """
    raw = _require_mapping(raw, "detail record")
    title = (fallback_document.name if fallback_document else "") or UNTITLED

    segmentation = first_present(raw, (
        path('segmentation_accuracy'),
        lambda _: fallback_document.segmentation_accuracy if fallback_document else None,
    ), 0)

    return DocumentDetail(
        title=title,
        summary=str(resolve(raw, 'summary', placeholder_summary(title))),
        extracted_text=str(resolve(raw, 'extracted_text', "")),
        tables=[normalize_table(t) for t in _as_list(resolve(raw, 'tables', []))],
        entities=[normalize_entity(e) for e in _as_list(resolve(raw, 'entities', []))],
        page_count=_page_count(resolve(raw, 'page_count', 1)),
        segmentation_score=normalize_score(segmentation),
        layout_score=normalize_score(resolve(raw, 'layout_score', 0)),
        extraction_score=normalize_score(fallback_document.extraction_accuracy if fallback_document else 0),
        extracted_fields=extracted_fields(fallback_document),
    )


def empty_detail() -> DocumentDetail:
    """Placeholder shown when no document is selected."""
    return DocumentDetail(
        title="No Document Selected",
        summary="Please select a document to view its details.",
    )


# =============================================================================
# Search Records
# =============================================================================

def normalize_search_result(raw: Mapping[str, Any]) -> SearchResult:
    """Map one record of ``GET /api/search`` to a SearchResult."""
    raw = _require_mapping(raw, "search result")
    return SearchResult(
        document_id=str(resolve(raw, 'document_id', "")),
        document_name=str(resolve(raw, 'document_name', "")),
        uploaded_at=format_timestamp(resolve(raw, 'created_timestamp')),
        summary=str(resolve(raw, 'summary', NO_SUMMARY)),
    )


def normalize_search_results(payload: Any) -> List[SearchResult]:
    """Normalize ``{results: [...]}``; a missing or null list is zero results."""
    if not isinstance(payload, Mapping):
        raise NormalizationError("search response must be a mapping")
    records = payload.get('results') or []
    if not isinstance(records, list):
        raise NormalizationError("results must be a list")
    return [normalize_search_result(record) for record in records]
