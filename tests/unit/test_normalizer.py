"""
DocScope - Normalizer Unit Tests
================================

Tests for mapping listing, detail and search records to view models.
"""

import pytest

from docscope.shared.enums import DocumentStatus, ProgressSource
from docscope.shared.exceptions import NormalizationError
from docscope.shared.models import Document
from docscope.shared.normalizer import (
    FIELD_PATHS,
    empty_detail,
    first_present,
    format_timestamp,
    normalize_document_detail,
    normalize_document_list,
    normalize_document_summary,
    normalize_entity,
    normalize_score,
    normalize_search_results,
    normalize_table,
    path,
    resolve,
)


# =============================================================================
# Field path resolution
# =============================================================================

class TestFieldPaths:
    """Tests for accessor tables."""

    def test_path_walks_nested_mappings(self):
        record = {"a": {"b": {"c": 7}}}
        assert path("a", "b", "c")(record) == 7

    def test_path_missing_hop_is_none(self):
        assert path("a", "b", "c")({"a": {"x": 1}}) is None
        assert path("a", "b")({"a": "not a mapping"}) is None

    def test_first_present_skips_none_and_empty_string(self):
        record = {"a": None, "b": "", "c": 0, "d": "x"}
        accessors = (path("a"), path("b"), path("c"), path("d"))
        assert first_present(record, accessors) == 0

    def test_first_present_default(self):
        assert first_present({}, (path("a"),), default="fallback") == "fallback"

    def test_every_logical_field_has_accessors(self):
        for name, accessors in FIELD_PATHS.items():
            assert accessors, name

    def test_resolve_uses_order(self):
        record = {"named_entities": [1], "segmentation_output": {"entities": [2]}}
        assert resolve(record, "entities") == [2]


# =============================================================================
# Scores
# =============================================================================

class TestNormalizeScore:
    """Fraction vs percentage rule."""

    @pytest.mark.parametrize("value,expected", [
        (0.9712, 97.12),
        (0.5, 50.0),
        (0.0, 0.0),
        (0.123456, 12.35),
        (1, 1.0),
        (88.4567, 88.46),
        (100, 100.0),
    ])
    def test_rule(self, value, expected):
        assert normalize_score(value) == expected

    @pytest.mark.parametrize("value", [1.0, 12.5, 97.12, 100.0])
    def test_idempotent_on_percentages(self, value):
        assert normalize_score(normalize_score(value)) == normalize_score(value) == value

    @pytest.mark.parametrize("value", [None, "n/a", {}])
    def test_non_numeric_is_zero(self, value):
        assert normalize_score(value) == 0.0

    def test_numeric_string(self):
        assert normalize_score("0.25") == 25.0


# =============================================================================
# Listing records
# =============================================================================

class TestNormalizeDocumentSummary:
    """Tests for GET /api/documents records."""

    @pytest.mark.parametrize("code,status,progress", [
        ("PROCESSED", DocumentStatus.COMPLETE, 100.0),
        ("UPLOADED", DocumentStatus.PROCESSING, 50.0),
        ("QUEUED", DocumentStatus.UPLOADING, 0.0),
        ("FAILED", DocumentStatus.UPLOADING, 0.0),
        (None, DocumentStatus.UPLOADING, 0.0),
    ])
    def test_status_from_code(self, listing_record, code, status, progress):
        listing_record["status_code"] = code
        doc = normalize_document_summary(listing_record)
        assert doc.status == status
        assert doc.progress == progress

    @pytest.mark.parametrize("code", [["PROCESSED"], {"code": "PROCESSED"}, 3])
    def test_non_string_status_code(self, listing_record, code):
        listing_record["status_code"] = code
        doc = normalize_document_summary(listing_record)
        assert doc.status == DocumentStatus.UPLOADING
        assert doc.progress == 0.0

    def test_field_mapping(self, listing_record):
        doc = normalize_document_summary(listing_record)

        assert doc.id == "doc-001"
        assert doc.server_id == "doc-001"
        assert doc.name == "invoice_march.pdf"
        assert doc.size == "-"
        assert doc.uploaded_at == "05/03/2024 14:30"
        assert doc.display_status == "Processed"
        assert doc.storage_path == "s3://bucket/doc-001.pdf"
        assert doc.file_type == "application/pdf"
        assert doc.is_new is False
        assert doc.source == ProgressSource.SERVER_CONFIRMED

    def test_accuracies_on_percentage_scale(self, listing_record):
        doc = normalize_document_summary(listing_record)
        assert doc.extraction_accuracy == 97.12
        assert doc.segmentation_accuracy == 88.46

    def test_missing_accuracies_default_to_100(self, listing_record):
        del listing_record["textract_accuracy"]
        listing_record["segmentation_accuracy"] = None
        doc = normalize_document_summary(listing_record)
        assert doc.extraction_accuracy == 100.0
        assert doc.segmentation_accuracy == 100.0

    def test_missing_extension(self, listing_record):
        del listing_record["file_extension"]
        assert normalize_document_summary(listing_record).name == "invoice_march"

    def test_non_mapping_rejected(self):
        with pytest.raises(NormalizationError):
            normalize_document_summary(["not", "a", "record"])

    def test_list_payload(self, listing_payload):
        docs = normalize_document_list(listing_payload)
        assert [d.id for d in docs] == ["doc-001", "doc-002", "doc-003"]

    def test_list_payload_without_documents(self):
        assert normalize_document_list({}) == []
        assert normalize_document_list({"documents": None}) == []


class TestFormatTimestamp:

    def test_iso_with_zulu(self):
        assert format_timestamp("2024-03-05T14:30:59Z") == "05/03/2024 14:30"

    def test_unparseable_returned_as_text(self):
        assert format_timestamp("yesterday") == "yesterday"

    def test_missing(self):
        assert format_timestamp(None) == ""


# =============================================================================
# Detail records
# =============================================================================

@pytest.fixture
def selected_document():
    return Document(
        id="doc-001",
        server_id="doc-001",
        name="invoice_march.pdf",
        uploaded_at="05/03/2024 14:30",
        status=DocumentStatus.COMPLETE,
        progress=100,
        extraction_accuracy=97.12,
        segmentation_accuracy=88.46,
        file_type="application/pdf",
    )


class TestNormalizeDocumentDetail:
    """Tests for GET /api/documents/{id} records."""

    def test_full_record(self, detail_record, selected_document):
        detail = normalize_document_detail(detail_record, selected_document)

        assert detail.title == "invoice_march.pdf"
        assert detail.summary == "Invoice from Acme Corp for March services."
        assert detail.extracted_text == "# Invoice\n\nTotal: 1,200"
        assert detail.page_count == 3
        assert detail.segmentation_score == 84.56
        assert detail.layout_score == 93.21
        assert detail.extraction_score == 97.12

    def test_entities_prefer_top_level(self, detail_record, selected_document):
        detail = normalize_document_detail(detail_record, selected_document)
        assert [(e.category, e.value) for e in detail.entities] == [
            ("Person", "Jane Doe"),
            ("Organization", "Acme"),
            ("Date", "2024-03-05"),
        ]

    def test_entities_from_segmentation_output(self, detail_record, selected_document):
        del detail_record["entities"]
        detail = normalize_document_detail(detail_record, selected_document)
        assert detail.entities[0].category == "Ignored"

    def test_entities_from_named_entities(self, selected_document):
        raw = {"named_entities": [{"entity_type": "Location", "text": "Pune"}]}
        detail = normalize_document_detail(raw, selected_document)
        assert detail.entities[0].category == "Location"
        assert detail.entities[0].value == "Pune"

    def test_extracted_text_falls_back_to_plain_text(self, detail_record, selected_document):
        del detail_record["segmentation_output"]["metadata"]["additional_info"]
        detail = normalize_document_detail(detail_record, selected_document)
        assert detail.extracted_text == "Invoice Total 1200"

    def test_tables(self, detail_record, selected_document):
        detail = normalize_document_detail(detail_record, selected_document)
        assert len(detail.tables) == 1
        table = detail.tables[0]
        assert table.columns == ["Item", "Amount"]
        assert table.confidence == 0.91
        assert table.rows[1] == {"Item": "Travel"}

    def test_defaults_for_empty_record(self, selected_document):
        detail = normalize_document_detail({}, selected_document)

        assert detail.summary == 'This document "invoice_march.pdf" has been processed.'
        assert detail.extracted_text == ""
        assert detail.tables == []
        assert detail.entities == []
        assert detail.page_count == 1
        assert detail.layout_score == 0.0
        # Falls back to the registry entry's accuracy
        assert detail.segmentation_score == 88.46

    def test_without_fallback_document(self):
        detail = normalize_document_detail({"segmentation_accuracy": 0.5})
        assert detail.title == "Untitled Document"
        assert detail.segmentation_score == 50.0
        assert detail.extraction_score == 0.0
        assert detail.extracted_fields == []

    def test_page_count_never_below_one(self, selected_document):
        raw = {"segmentation_output": {"metadata": {"num_pages": 0}}}
        assert normalize_document_detail(raw, selected_document).page_count == 1

    def test_extracted_fields(self, detail_record, selected_document):
        detail = normalize_document_detail(detail_record, selected_document)
        fields = {f.label: f.value for f in detail.extracted_fields}
        assert fields == {
            "Document Type": "application/pdf",
            "Status": "Complete",
            "Upload Time": "05/03/2024 14:30",
            "Document ID": "doc-001",
        }

    def test_deterministic(self, detail_record, selected_document):
        first = normalize_document_detail(detail_record, selected_document)
        second = normalize_document_detail(detail_record, selected_document)
        assert first == second

    def test_empty_detail(self):
        detail = empty_detail()
        assert detail.title == "No Document Selected"
        assert detail.page_count == 1


class TestNormalizeEntity:

    def test_alternate_field_names(self):
        entity = normalize_entity({"entity_type": "Organization", "text": "Acme"})
        assert entity.category == "Organization"
        assert entity.value == "Acme"

    def test_kept_when_fields_missing(self):
        entity = normalize_entity({"confidence": 0.4})
        assert entity.category == ""
        assert entity.value == ""

    def test_plain_string(self):
        assert normalize_entity("Acme").value == "Acme"


class TestNormalizeTable:

    def test_rows_key(self):
        table = normalize_table({"rows": [{"a": 1}]})
        assert table.rows == [{"a": 1}]
        assert table.confidence is None

    def test_bare_list_of_rows(self):
        assert normalize_table([{"a": 1}, "junk"]).rows == [{"a": 1}]

    def test_garbage(self):
        assert normalize_table(42).rows == []


# =============================================================================
# Search records
# =============================================================================

class TestNormalizeSearchResults:

    def test_order_and_fields(self, search_payload):
        results = normalize_search_results(search_payload)

        assert [r.document_id for r in results] == ["doc-007", "doc-004"]
        assert results[0].document_name == "tax_return_2023"
        assert results[0].uploaded_at == "10/01/2024 09:05"
        assert results[0].summary == "Annual income statement and deductions."

    def test_missing_summary_placeholder(self, search_payload):
        results = normalize_search_results(search_payload)
        assert results[1].summary == "No summary available."

    def test_empty(self):
        assert normalize_search_results({"results": []}) == []
        assert normalize_search_results({}) == []

    def test_malformed(self):
        with pytest.raises(NormalizationError):
            normalize_search_results({"results": "oops"})
        with pytest.raises(NormalizationError):
            normalize_search_results(["oops"])
