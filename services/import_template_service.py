"""
Downloadable example files for product imports.

Both formats carry the same headers the parser expects and two sample rows.
"""

from io import BytesIO

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
import structlog

from models.product_import import IMPORT_COLUMNS

logger = structlog.get_logger(__name__)

TEMPLATE_BASENAME = "plantilla_productos"

TEMPLATE_ROWS: list[dict] = [
    {
        "nombre": "Café Americano",
        "descripcion": "Café negro tradicional",
        "categoria": "Bebidas",
        "precio": 5000,
        "costo": 1500,
        "stock": 100,
        "stock_minimo": 10,
        "es_alcoholico": "no",
    },
    {
        "nombre": "Cerveza Corona",
        "descripcion": "Cerveza importada",
        "categoria": "Bebidas",
        "precio": 8000,
        "costo": 4000,
        "stock": 50,
        "stock_minimo": 5,
        "es_alcoholico": "sí",
    },
]

HEADER_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")


def build_template_csv() -> bytes:
    """UTF-8 CSV template (with BOM so spreadsheet apps keep the accents)."""
    df = pd.DataFrame(TEMPLATE_ROWS, columns=list(IMPORT_COLUMNS))
    logger.debug("building_import_template", format="csv")
    return df.to_csv(index=False).encode("utf-8-sig")


def build_template_xlsx() -> bytes:
    """Single-sheet Excel template."""
    logger.debug("building_import_template", format="xlsx")

    wb = Workbook()
    ws = wb.active
    ws.title = "Productos"

    headers = list(IMPORT_COLUMNS)
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.fill = HEADER_FILL

    for row in TEMPLATE_ROWS:
        ws.append([row[h] for h in headers])

    for idx, header in enumerate(headers, start=1):
        width = max(len(header), *(len(str(r[header])) for r in TEMPLATE_ROWS)) + 2
        ws.column_dimensions[ws.cell(row=1, column=idx).column_letter].width = width

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
