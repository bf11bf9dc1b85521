"""
Presentation helpers for entities, tables and list rows.

Pure functions turning normalized models into render-ready values.
None of them raise on odd input.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from docscope.shared.enums import EntityIcon
from docscope.shared.models import Entity, Table

UNKNOWN_CATEGORY = "Unknown"

# Ordered keyword rules; the first rule with a matching keyword wins.
# "locaton" is a misspelling emitted by the extraction backend.
ENTITY_ICON_RULES: Tuple[Tuple[Tuple[str, ...], EntityIcon], ...] = (
    (("person", "name"), EntityIcon.PERSON),
    (("location", "locaton"), EntityIcon.LOCATION),
    (("date",), EntityIcon.DATE),
    (("organization", "org"), EntityIcon.ORGANIZATION),
    (("id", "number"), EntityIcon.IDENTIFIER),
    (("document", "type"), EntityIcon.DOCUMENT_TYPE),
    (("signature",), EntityIcon.SIGNATURE),
)

IMAGE_EXTENSIONS = re.compile(r"\.(jpg|jpeg|png|gif|bmp|tiff|tif|webp)$", re.IGNORECASE)


# =============================================================================
# Entities
# =============================================================================

def classify_entity(category: Optional[str]) -> EntityIcon:
    """Icon category for an entity category name (case-insensitive substring match)."""
    text = (category or "").lower()
    for keywords, icon in ENTITY_ICON_RULES:
        if any(keyword in text for keyword in keywords):
            return icon
    return EntityIcon.GENERIC


def _entity_category(entity: Union[Entity, Mapping[str, Any]]) -> str:
    if isinstance(entity, Entity):
        return entity.category or UNKNOWN_CATEGORY
    if isinstance(entity, Mapping):
        return entity.get("type") or entity.get("entity_type") or UNKNOWN_CATEGORY
    return UNKNOWN_CATEGORY


def count_by_category(entities: Iterable[Union[Entity, Mapping[str, Any]]]) -> Dict[str, int]:
    """
    Count entities per category.

    Keys keep first-seen order; entities without a category count as
    "Unknown". Accepts normalized Entity objects or raw backend records.
    """
    counts: Dict[str, int] = {}
    for entity in entities:
        category = _entity_category(entity)
        counts[category] = counts.get(category, 0) + 1
    return counts


# =============================================================================
# Tables
# =============================================================================

def table_columns(table: Union[Table, Iterable[Mapping[str, Any]]]) -> List[str]:
    """Column names taken from the first row; empty for a table without rows."""
    rows = table.rows if isinstance(table, Table) else list(table or [])
    if not rows or not isinstance(rows[0], Mapping):
        return []
    return list(rows[0].keys())


def table_cell(row: Mapping[str, Any], column: str) -> str:
    """Cell text; blank when the row lacks the column."""
    value = row.get(column)
    return "" if value is None else str(value)


def table_grid(table: Table) -> List[List[str]]:
    """Rows as lists of cell text aligned with table_columns()."""
    columns = table_columns(table)
    return [[table_cell(row, column) for column in columns] for row in table.rows]


def format_confidence(confidence: Optional[float]) -> str:
    """Table confidence (0-1) as a percentage string, blank if unknown."""
    if not confidence:
        return ""
    return f"{confidence * 100:.2f}%"


# =============================================================================
# Registry rows and search cards
# =============================================================================

def format_file_size(size: int) -> str:
    """Human readable size: B below 1 KiB, then KB and MB with one decimal."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def progress_eta_label(progress: float) -> str:
    """Rough time-remaining label for a progress value."""
    if progress >= 100:
        return "Done"
    if progress >= 50:
        return "~ 30 Sec"
    return "~ 1 Min"


def highlight_segments(text: Optional[str], query: Optional[str]) -> List[Tuple[str, bool]]:
    """
    Split text around case-insensitive occurrences of query.

    Returns:
        (segment, is_match) pairs covering the whole text in order
    """
    if not text:
        return []
    if not query or not query.strip():
        return [(text, False)]

    pattern = re.compile(f"({re.escape(query.strip())})", re.IGNORECASE)
    segments = []
    for index, part in enumerate(pattern.split(text)):
        if part:
            # re.split places captured matches at odd indexes
            segments.append((part, index % 2 == 1))
    return segments


def is_image_document(name: Optional[str]) -> bool:
    """Whether the document can be previewed as an image."""
    return bool(name and IMAGE_EXTENSIONS.search(name))
