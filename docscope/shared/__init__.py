"""Shared models, enums, exceptions and normalization."""

from .enums import (
    DocumentStatus,
    ServerStatusCode,
    ProgressSource,
    EntityIcon,
    DetailTab,
)

from .models import (
    Document,
    UploadFile,
    Entity,
    Table,
    ExtractedField,
    DocumentDetail,
    DetailState,
    SearchResult,
    SearchOutcome,
)

from .normalizer import (
    FIELD_PATHS,
    normalize_score,
    normalize_document_summary,
    normalize_document_list,
    normalize_document_detail,
    normalize_entity,
    normalize_table,
    normalize_search_result,
    normalize_search_results,
    empty_detail,
)
