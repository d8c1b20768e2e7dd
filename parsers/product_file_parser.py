"""
Parser for product import uploads.

Turns an uploaded CSV or Excel file into an ordered list of raw rows,
each a dict of header -> cell value. Headers are kept verbatim; no
typing or validation happens here.
"""

from io import BytesIO
from pathlib import PurePath
from typing import Optional
import structlog

import pandas as pd

from config import settings
from exceptions import ImportParseError, UnsupportedFileTypeError
from models.product_import import RawValue
from utils.text_utils import is_blank

logger = structlog.get_logger(__name__)

# Extension -> pandas reader engine (None = CSV)
SUPPORTED_EXTENSIONS: dict[str, Optional[str]] = {
    ".csv": None,
    ".xlsx": "openpyxl",
    ".xls": "xlrd",
}


def parse_product_file(filename: str, content: bytes) -> list[dict[str, RawValue]]:
    """
    Parse an uploaded product file.

    Args:
        filename: Original upload name, used only for its extension
        content: Raw file bytes

    Returns:
        Raw rows in file order, blank rows removed

    Raises:
        UnsupportedFileTypeError: Extension is not .csv, .xlsx or .xls
        ImportParseError: File too large, empty, or not decodable
    """
    extension = PurePath(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        logger.warning("import_file_unsupported", filename=filename, extension=extension)
        raise UnsupportedFileTypeError(filename, sorted(SUPPORTED_EXTENSIONS))

    if len(content) > settings.import_max_file_size_bytes:
        raise ImportParseError(
            message=f"El archivo supera el máximo de {settings.import_max_file_size_mb} MB",
            details={"filename": filename, "size_bytes": len(content)}
        )

    logger.info("parsing_import_file", filename=filename, size_bytes=len(content))

    engine = SUPPORTED_EXTENSIONS[extension]
    try:
        if engine is None:
            df = _read_csv(content)
        else:
            df = _read_excel(content, engine)
    except Exception as e:
        logger.error("import_file_read_failed", filename=filename, error=str(e))
        raise ImportParseError(
            message="No se pudo leer el archivo" if engine is None
            else "No se pudo procesar el archivo Excel",
            details={"filename": filename, "original_error": str(e)}
        ) from e

    if len(df.columns) == 0:
        raise ImportParseError(
            message="El archivo no tiene fila de encabezados",
            details={"filename": filename}
        )

    rows = _to_records(df)
    if not rows:
        raise ImportParseError(
            message="El archivo no contiene productos",
            details={"filename": filename}
        )

    logger.info(
        "import_file_parsed",
        filename=filename,
        row_count=len(rows),
        columns=[str(c) for c in df.columns]
    )

    return rows


def _read_csv(content: bytes) -> pd.DataFrame:
    """Read UTF-8 CSV with every cell as text."""
    return pd.read_csv(
        BytesIO(content),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
    )


def _read_excel(content: bytes, engine: str) -> pd.DataFrame:
    """Read the first sheet, header on the first row."""
    return pd.read_excel(BytesIO(content), sheet_name=0, header=0, engine=engine)


def _to_records(df: pd.DataFrame) -> list[dict[str, RawValue]]:
    """Convert to plain Python rows, dropping fully blank ones."""
    rows = []
    for record in df.to_dict(orient="records"):
        row = {str(col): _clean_cell(value) for col, value in record.items()}
        if any(value is not None for value in row.values()):
            rows.append(row)
    return rows


def _clean_cell(value) -> RawValue:
    """Blank and NaN cells become None; everything else is kept as read."""
    if is_blank(value):
        return None
    return value
