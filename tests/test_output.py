"""
Tests for the output module.

Tests CSV rendering, the multi-schema bundle and writing files to disk.
"""

import base64
import csv
import io
import json
from datetime import datetime, timezone

import pytest

from mockem.catalog import load_catalog, load_vocabularies
from mockem.generator import Generator
from mockem.models import GenerationRequest, GenerationResult
from mockem.output import ExportWriter, decode_bundle, encode_bundle, to_csv

GENERATED_AT = datetime(2024, 3, 9, 8, 30, tzinfo=timezone.utc)


def _parse_csv(text):
    """Split a MockEm CSV into comment lines and parsed records."""
    lines = text.split("\n")
    comments = [line for line in lines if line.startswith("#")]
    body = text.split("\n\n", 1)[1]
    return comments, list(csv.reader(io.StringIO(body)))


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


@pytest.fixture(scope="module")
def vocabularies():
    return load_vocabularies()


@pytest.fixture
def sales_result(catalog, vocabularies):
    """Three related sales schemas, 4 rows each."""
    request = GenerationRequest(
        category="sales-crm",
        schemas=["companies", "contacts", "opportunities"],
        row_count=4,
        seed=5,
    )
    return Generator(catalog, request, vocabularies, now=GENERATED_AT).generate()


class TestToCsv:
    """Tests for CSV rendering."""

    def test_header_lines(self):
        text = to_csv([{"id": 1, "name": "Acme"}], GENERATED_AT)
        lines = text.split("\n")

        assert lines[0] == "# Powered by MockEm - Enterprise Mock Data Generator"
        assert lines[1] == "# All data is purely fictional and generated for testing purposes"
        assert lines[2] == "# Generated on: 2024-03-09T08:30:00+00:00"
        assert lines[3] == ""
        assert lines[4] == "id,name"
        assert lines[5] == "1,Acme"

    def test_empty_rows(self):
        assert to_csv([]) == ""

    def test_special_characters_round_trip(self):
        rows = [
            {"id": 1, "name": 'Acme, "The" Company', "note": "line one\nline two"},
            {"id": 2, "name": "Plain", "note": None},
        ]

        _, records = _parse_csv(to_csv(rows, GENERATED_AT))

        assert records[0] == ["id", "name", "note"]
        assert records[1] == ["1", 'Acme, "The" Company', "line one\nline two"]
        assert records[2] == ["2", "Plain", ""]

    def test_quotes_doubled(self):
        text = to_csv([{"id": 1, "name": 'say "hi"'}], GENERATED_AT)

        assert '"say ""hi"""' in text

    def test_dates_iso_formatted(self):
        rows = [{"id": 1, "created_date": datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc)}]

        _, records = _parse_csv(to_csv(rows, GENERATED_AT))

        assert records[1][1] == "2023-12-31T23:59:00+00:00"

    def test_numbers_unchanged(self):
        rows = [{"id": 1, "amount": 1234.5, "count": 7, "manager_id": None}]

        _, records = _parse_csv(to_csv(rows, GENERATED_AT))

        assert records[1] == ["1", "1234.5", "7", ""]


class TestBundle:
    """Tests for the length-prefixed bundle."""

    def test_round_trip_with_awkward_content(self):
        files = {
            "a.csv": "id\n1\n--- FILE: fake LENGTH=3 ---\n",
            "b.csv": "",
            "manifest.json": '{"k": "v"}',
        }

        assert decode_bundle(encode_bundle(files)) == files

    def test_rejects_other_data(self):
        with pytest.raises(ValueError):
            decode_bundle(base64.b64encode(b"PK\x03\x04").decode("ascii"))


class TestExportWriter:
    """Tests for ExportWriter."""

    def test_single_schema_csv(self, catalog, vocabularies):
        request = GenerationRequest(category="human-resources", schemas=["departments"], row_count=3)
        result = Generator(catalog, request, vocabularies, now=GENERATED_AT).generate()

        payload = ExportWriter(result).export()

        assert payload.filename == "mockem_human-resources_general_departments_2024-03-09.csv"
        assert payload.zip_data is None
        _, records = _parse_csv(payload.csv_data)
        assert len(records) == 4
        assert payload.to_dict() == {"csvData": payload.csv_data, "filename": payload.filename}

    def test_multi_schema_bundle(self, sales_result):
        payload = ExportWriter(sales_result).export()

        assert payload.filename == "mockem_sales-crm_general_2024-03-09.zip"
        assert payload.csv_data is None
        assert set(payload.to_dict()) == {"zipData", "filename"}

        files = decode_bundle(payload.zip_data)
        assert set(files) == {
            "companies.csv",
            "contacts.csv",
            "opportunities.csv",
            "manifest.json",
        }

        manifest = json.loads(files["manifest.json"])
        assert manifest["schemas"] == ["companies", "contacts", "opportunities"]
        assert manifest["generation_order"] == ["companies", "contacts", "opportunities"]
        assert manifest["total_rows"] == 12
        assert manifest["seed"] == 5
        assert manifest["tables"]["contacts"]["rows"] == 4

        comments, records = _parse_csv(files["contacts.csv"])
        assert len(comments) == 3
        assert records[0][:2] == ["id", "company_id"]
        assert len(records) == 5

    def test_manifest_lists_placeholders(self, catalog, vocabularies):
        request = GenerationRequest(
            category="supply-chain", schemas=["orders", "products"], row_count=2
        )
        result = Generator(catalog, request, vocabularies, now=GENERATED_AT).generate()

        manifest = ExportWriter(result).manifest()

        assert manifest["tables"]["products"]["unresolved_references"] == ["supplier_id"]
        assert manifest["tables"]["orders"]["unresolved_references"] == []

    def test_write_files(self, sales_result, tmp_path):
        paths = ExportWriter(sales_result).write_files(tmp_path / "out")

        assert set(paths) == {
            "companies.csv",
            "contacts.csv",
            "opportunities.csv",
            "manifest.json",
        }
        assert all(path.exists() for path in paths.values())

        manifest = json.loads(paths["manifest.json"].read_text())
        assert manifest["category"] == "sales-crm"
        assert paths["companies.csv"].read_text().startswith("# Powered by MockEm")

    def test_empty_result_writes_no_csv(self, tmp_path):
        result = GenerationResult(
            category="sales-crm",
            platform="general",
            order=[],
            data={},
            generated_at=GENERATED_AT,
        )

        paths = ExportWriter(result).write_files(tmp_path)

        assert list(paths) == ["manifest.json"]
