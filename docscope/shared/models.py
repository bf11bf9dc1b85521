"""
DocScope Models
===============

Canonical view models produced by the normalizer and owned by the
registry and controllers.

Key design principles:
1. The registry is the only owner and mutator of Document entries
2. DocumentDetail and SearchOutcome are replaced wholesale, never patched
3. Every accuracy/score is expressed on a 0-100 scale
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

from .enums import DocumentStatus, ProgressSource


# =============================================================================
# Registry Entries
# =============================================================================

@dataclass
class Document:
    """
    Single registry entry.

    Attributes:
        id: Registry key, client generated for pending uploads
        server_id: Backend document id, used for detail and search correlation
        name: Display name including extension
        size: Human readable size ("-" when the server does not report it)
        uploaded_at: Display timestamp
        status: UI-facing lifecycle stage
        progress: 0-100, 100 exactly when status is Complete
        extraction_accuracy: 0-100
        segmentation_accuracy: 0-100
        is_new: Created during the current client session
        source: Whether progress was simulated locally or confirmed by the server
    """
    id: str
    name: str
    size: str = "-"
    uploaded_at: str = ""
    status: DocumentStatus = DocumentStatus.UPLOADING
    progress: float = 0.0
    extraction_accuracy: float = 100.0
    segmentation_accuracy: float = 100.0
    is_new: bool = False
    source: ProgressSource = ProgressSource.LOCAL_SIMULATED
    server_id: Optional[str] = None
    status_label: Optional[str] = None
    storage_path: Optional[str] = None
    file_type: Optional[str] = None

    def __post_init__(self):
        """Clamp progress and keep status consistent with it."""
        self.progress = max(0.0, min(100.0, float(self.progress)))
        if self.progress >= 100.0:
            self.status = DocumentStatus.COMPLETE
        elif self.status == DocumentStatus.COMPLETE:
            self.status = DocumentStatus.PROCESSING

    @property
    def is_complete(self) -> bool:
        return self.status == DocumentStatus.COMPLETE

    @property
    def display_status(self) -> str:
        """Server status name when known, else the lifecycle stage."""
        return self.status_label or self.status.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'server_id': self.server_id,
            'name': self.name,
            'size': self.size,
            'uploaded_at': self.uploaded_at,
            'status': self.status.value,
            'status_label': self.display_status,
            'progress': self.progress,
            'extraction_accuracy': self.extraction_accuracy,
            'segmentation_accuracy': self.segmentation_accuracy,
            'is_new': self.is_new,
            'source': self.source.value,
            'storage_path': self.storage_path,
            'file_type': self.file_type,
        }


@dataclass
class UploadFile:
    """A file submitted for upload."""
    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> 'UploadFile':
        """Read a file from disk."""
        path = Path(path)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )


# =============================================================================
# Detail View Models
# =============================================================================

@dataclass
class Entity:
    """Named entity extracted from a document."""
    category: str
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {'category': self.category, 'value': self.value}


@dataclass
class Table:
    """
    Extracted table.

    Rows are mappings from column name to cell value. The column set is
    taken from the first row; rows missing a key render a blank cell.
    """
    rows: List[Dict[str, Any]] = field(default_factory=list)
    confidence: Optional[float] = None

    @property
    def columns(self) -> List[str]:
        if not self.rows:
            return []
        return list(self.rows[0].keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'columns': self.columns,
            'rows': [dict(row) for row in self.rows],
            'confidence': self.confidence,
        }


@dataclass
class ExtractedField:
    """Label/value pair shown in the detail side panel."""
    label: str
    value: str


@dataclass
class DocumentDetail:
    """Normalized detail record for the currently viewed document."""
    title: str
    summary: str
    extracted_text: str = ""
    tables: List[Table] = field(default_factory=list)
    entities: List[Entity] = field(default_factory=list)
    page_count: int = 1
    segmentation_score: float = 0.0
    layout_score: float = 0.0
    extraction_score: float = 0.0
    extracted_fields: List[ExtractedField] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'title': self.title,
            'summary': self.summary,
            'extracted_text': self.extracted_text,
            'tables': [t.to_dict() for t in self.tables],
            'entities': [e.to_dict() for e in self.entities],
            'page_count': self.page_count,
            'segmentation_score': self.segmentation_score,
            'layout_score': self.layout_score,
            'extraction_score': self.extraction_score,
            'extracted_fields': [
                {'label': f.label, 'value': f.value} for f in self.extracted_fields
            ],
        }


@dataclass
class DetailState:
    """Snapshot of the detail controller."""
    document_id: Optional[str] = None
    detail: Optional[DocumentDetail] = None
    loading: bool = False
    error: Optional[str] = None


# =============================================================================
# Search Models
# =============================================================================

@dataclass
class SearchResult:
    """Single search hit rendered as a result card."""
    document_id: str
    document_name: str
    uploaded_at: str
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'document_id': self.document_id,
            'document_name': self.document_name,
            'uploaded_at': self.uploaded_at,
            'summary': self.summary,
        }


@dataclass
class SearchOutcome:
    """
    Result of one search.

    An empty result list with no error is a confirmed zero-match answer;
    an empty list with an error means the search service failed.
    """
    query: str = ""
    results: List[SearchResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return not self.results
