"""
Helpers for raw spreadsheet values.

Cells arrive as str (CSV) or int/float/bool (Excel). These helpers
normalize them for comparison and conversion.
"""

import math
from typing import Optional

from models.product_import import RawValue, TRUTHY_TOKENS


def is_blank(value: RawValue) -> bool:
    """True for None, NaN, and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def clean_text(value: RawValue) -> Optional[str]:
    """
    Convert a cell to trimmed text.

    - "  Café  " -> "Café"
    - 123 -> "123"
    - "" / None -> None

    Integral floats lose the ".0" Excel adds to numeric cells.
    """
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_name(value: RawValue) -> str:
    """
    Normalize a product or category name for comparison.

    "  Café " -> "café", "AGUA" -> "agua". Empty input gives "".
    """
    text = clean_text(value)
    return text.lower() if text else ""


def parse_number(value: RawValue) -> Optional[float]:
    """
    Parse a cell as a finite number.

    Returns None if the value is blank, boolean, non-numeric, NaN or infinite.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_flag(value: RawValue) -> bool:
    """
    Interpret a yes/no cell.

    True for True, 1, and the tokens "true", "sí", "si", "1" (any case).
    Everything else, including "no" and blanks, is False.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    text = clean_text(value)
    return text is not None and text.lower() in TRUTHY_TOKENS
