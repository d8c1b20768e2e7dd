"""
Row validation and duplicate classification for product imports.

Pure functions: given the parsed rows and a catalog snapshot, produce one
ValidatedProduct per row, in file order. Same input, same output.
"""

from collections import Counter
from typing import Iterable, Optional, Sequence

from models.product_import import (
    Category,
    DuplicateType,
    ExistingProduct,
    ImportAction,
    ImportRow,
    ReferenceData,
    ValidatedProduct,
)
from utils.text_utils import clean_text, is_blank, normalize_name, parse_number

# Row messages (shown to the operator as-is)
NAME_REQUIRED = "Nombre es requerido"
CATEGORY_REQUIRED = "Categoría es requerida"
CATEGORY_NOT_FOUND = 'Categoría "{value}" no existe'
CATEGORY_AMBIGUOUS = 'Categoría "{value}" es ambigua: coincide con varias categorías'
PRICE_INVALID = "Precio debe ser mayor a 0"
STOCK_INVALID = "Stock debe ser un número positivo"
MIN_STOCK_IGNORED = "Stock mínimo no es un número positivo - se importará como 0"
COST_IGNORED = "Costo no es un número válido - se importará sin costo"
DUPLICATE_IN_FILE = "Nombre duplicado en el archivo - se saltará salvo que elijas otra acción"
DUPLICATE_IN_CATALOG = 'Producto "{name}" ya existe en el catálogo'


def validate_import_rows(
    rows: Sequence[ImportRow],
    reference: ReferenceData,
) -> list[ValidatedProduct]:
    """
    Validate every row and classify name duplicates.

    Within-file counts are taken over the whole file before any row is
    classified, so every occurrence of a repeated name is flagged,
    including the first.

    Args:
        rows: Parsed rows in file order
        reference: Catalog snapshot for the same company

    Returns:
        One ValidatedProduct per row, same order
    """
    name_counts = Counter(
        normalized
        for normalized in (normalize_name(row.name) for row in rows)
        if normalized
    )
    categories = _index_by_name(reference.categories)
    products = _index_by_name(reference.products)

    return [
        _validate_row(row, name_counts, categories, products)
        for row in rows
    ]


def _validate_row(
    row: ImportRow,
    name_counts: Counter,
    categories: dict[str, list[Category]],
    products: dict[str, list[ExistingProduct]],
) -> ValidatedProduct:
    errors: list[str] = []
    warnings: list[str] = []
    duplicate_type = DuplicateType.NONE
    existing_product_id: Optional[str] = None
    action = ImportAction.CREATE

    # Name and duplicates
    normalized = normalize_name(row.name)
    if not normalized:
        errors.append(NAME_REQUIRED)
    else:
        if name_counts[normalized] > 1:
            duplicate_type = DuplicateType.WITHIN_FILE
            warnings.append(DUPLICATE_IN_FILE)
            action = ImportAction.SKIP

        matches = products.get(normalized)
        if matches and duplicate_type is not DuplicateType.WITHIN_FILE:
            existing = matches[0]
            duplicate_type = DuplicateType.AGAINST_CATALOG
            existing_product_id = existing.id
            warnings.append(DUPLICATE_IN_CATALOG.format(name=existing.name))
            action = ImportAction.SKIP

    # Category
    category_id: Optional[str] = None
    category_key = normalize_name(row.category)
    if not category_key:
        errors.append(CATEGORY_REQUIRED)
    else:
        candidates = categories.get(category_key, [])
        if not candidates:
            errors.append(CATEGORY_NOT_FOUND.format(value=clean_text(row.category)))
        elif len(candidates) > 1:
            errors.append(CATEGORY_AMBIGUOUS.format(value=clean_text(row.category)))
        else:
            category_id = candidates[0].id

    # Price
    price = parse_number(row.price)
    if price is None or price <= 0:
        errors.append(PRICE_INVALID)

    # Stock
    if not _is_non_negative_or_blank(row.stock):
        errors.append(STOCK_INVALID)

    # Non-blocking: replaced by defaults at commit
    if not _is_non_negative_or_blank(row.min_stock):
        warnings.append(MIN_STOCK_IGNORED)
    if not _is_non_negative_or_blank(row.cost):
        warnings.append(COST_IGNORED)

    return ValidatedProduct(
        source=row,
        errors=tuple(errors),
        warnings=tuple(warnings),
        category_id=category_id,
        duplicate_type=duplicate_type,
        existing_product_id=existing_product_id,
        default_action=action,
    )


# ===================
# HELPER FUNCTIONS
# ===================

def _index_by_name(items: Iterable) -> dict[str, list]:
    """Group reference items by normalized name, keeping snapshot order."""
    index: dict[str, list] = {}
    for item in items:
        key = normalize_name(item.name)
        if key:
            index.setdefault(key, []).append(item)
    return index


def _is_non_negative_or_blank(value) -> bool:
    if is_blank(value):
        return True
    number = parse_number(value)
    return number is not None and number >= 0
