"""Render-ready helpers for entities, tables, list rows and search cards."""

from .helpers import (
    classify_entity,
    count_by_category,
    table_columns,
    table_cell,
    table_grid,
    format_confidence,
    format_file_size,
    progress_eta_label,
    highlight_segments,
    is_image_document,
)
