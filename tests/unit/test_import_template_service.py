"""
Unit tests for the downloadable import templates.

Run: pytest tests/unit/test_import_template_service.py -v
"""

import pytest

from models.product_import import IMPORT_COLUMNS, ImportRow
from parsers import parse_product_file
from services.import_template_service import build_template_csv, build_template_xlsx
from services.product_import_validator import validate_import_rows
from tests.factories import ReferenceDataFactory


class TestImportTemplates:

    def test_csv_header_contract(self):
        content = build_template_csv()

        first_line = content.decode("utf-8-sig").splitlines()[0]
        assert first_line.split(",") == list(IMPORT_COLUMNS)

    @pytest.mark.parametrize("filename,builder", [
        ("plantilla_productos.csv", build_template_csv),
        ("plantilla_productos.xlsx", build_template_xlsx),
    ])
    def test_template_rows_validate(self, filename, builder):
        """The example rows parse and validate cleanly against a catalog with Bebidas."""
        # Arrange
        raw_rows = parse_product_file(filename, builder())
        rows = [ImportRow.from_raw(i, raw) for i, raw in enumerate(raw_rows, start=1)]

        # Act
        results = validate_import_rows(rows, ReferenceDataFactory.create())

        # Assert
        assert len(results) == 2
        assert all(r.is_valid for r in results)
        assert [r.source.name for r in results] == ["Café Americano", "Cerveza Corona"]
