"""
Unit tests for the product import file parser.

Run: pytest tests/unit/test_product_file_parser.py -v
"""

from io import BytesIO

import pandas as pd
import pytest

from parsers.product_file_parser import parse_product_file
from exceptions import ImportParseError, UnsupportedFileTypeError


HEADER = "nombre,descripcion,categoria,precio,costo,stock,stock_minimo,es_alcoholico"


def _csv(*lines: str) -> bytes:
    return "\n".join(lines).encode("utf-8")


def _xlsx(rows: list[dict]) -> bytes:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, index=False, sheet_name="Productos")
    return output.getvalue()


class TestParseCsv:

    def test_rows_keyed_by_header(self):
        """Should return one dict per data row, keyed by header text."""
        # Arrange
        content = _csv(
            HEADER,
            "Café Americano,Café negro,Bebidas,5000,1500,100,10,no",
            "Cerveza Corona,,Bebidas,8000,,50,5,sí",
        )

        # Act
        rows = parse_product_file("productos.csv", content)

        # Assert
        assert len(rows) == 2
        assert rows[0]["nombre"] == "Café Americano"
        assert rows[0]["precio"] == "5000"
        assert rows[1]["es_alcoholico"] == "sí"

    def test_empty_cells_become_none(self):
        content = _csv(HEADER, "Cerveza Corona,,Bebidas,8000,,,,")

        rows = parse_product_file("productos.csv", content)

        assert rows[0]["descripcion"] is None
        assert rows[0]["costo"] is None
        assert rows[0]["stock"] is None

    def test_blank_rows_are_dropped(self):
        content = _csv(HEADER, "Agua,,Bebidas,2000,,,,", ",,,,,,,", "", "Jugo,,Bebidas,3000,,,,")

        rows = parse_product_file("productos.csv", content)

        assert [r["nombre"] for r in rows] == ["Agua", "Jugo"]

    def test_utf8_bom_is_ignored(self):
        content = b"\xef\xbb\xbf" + _csv("nombre,precio", "Té,1000")

        rows = parse_product_file("productos.csv", content)

        assert list(rows[0].keys()) == ["nombre", "precio"]

    def test_unknown_headers_are_kept(self):
        """The parser does not filter columns; ImportRow ignores unknown ones."""
        rows = parse_product_file("p.csv", _csv("nombre,color", "Agua,azul"))

        assert rows[0]["color"] == "azul"

    def test_header_only_raises(self):
        with pytest.raises(ImportParseError) as exc_info:
            parse_product_file("productos.csv", _csv(HEADER))

        assert exc_info.value.status_code == 422
        assert "no contiene productos" in exc_info.value.message

    def test_empty_file_raises(self):
        with pytest.raises(ImportParseError):
            parse_product_file("productos.csv", b"")

    def test_extension_is_case_insensitive(self):
        rows = parse_product_file("PRODUCTOS.CSV", _csv("nombre", "Agua"))

        assert rows == [{"nombre": "Agua"}]


class TestParseExcel:

    def test_xlsx_first_sheet(self):
        """Should read numeric cells as numbers and blanks as None."""
        # Arrange
        content = _xlsx([
            {"nombre": "Café Americano", "categoria": "Bebidas", "precio": 5000, "costo": None},
            {"nombre": "Cerveza Corona", "categoria": "Bebidas", "precio": 8000, "costo": 4000},
        ])

        # Act
        rows = parse_product_file("productos.xlsx", content)

        # Assert
        assert len(rows) == 2
        assert rows[0]["nombre"] == "Café Americano"
        assert rows[0]["precio"] == 5000
        assert rows[0]["costo"] is None
        assert rows[1]["costo"] == 4000

    def test_corrupt_xlsx_raises_parse_error(self):
        with pytest.raises(ImportParseError) as exc_info:
            parse_product_file("productos.xlsx", b"definitely not a zip archive")

        assert exc_info.value.code == "IMPORT_PARSE_ERROR"
        assert "original_error" in exc_info.value.details


class TestUnsupportedFiles:

    @pytest.mark.parametrize("filename", ["productos.txt", "productos.json", "productos", ""])
    def test_unsupported_extension(self, filename):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            parse_product_file(filename, b"nombre\nAgua")

        assert exc_info.value.code == "IMPORT_UNSUPPORTED_FORMAT"
        assert "Formato no soportado" in exc_info.value.message

    def test_file_too_large(self):
        from config import settings

        content = b"nombre\n" + b"a" * (settings.import_max_file_size_bytes + 1)

        with pytest.raises(ImportParseError) as exc_info:
            parse_product_file("productos.csv", content)

        assert exc_info.value.details["size_bytes"] == len(content)
