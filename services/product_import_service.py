"""
Commit pass for product imports.

Writes the selected rows one at a time, in file order, through
ProductService. A failed write is counted and the pass moves on; there
is no retry and no cancellation.
"""

from typing import Callable, Optional, Sequence
import structlog

from models.product import ProductCreate, ProductUpdate
from models.product_import import ImportAction, ImportOutcome, ValidatedProduct
from services.import_overrides import ActionOverrideStore
from services.product_service import get_product_service
from utils.text_utils import clean_text, normalize_name, parse_flag, parse_number

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], None]
CatalogChangedCallback = Callable[[ImportOutcome], None]


def build_product_fields(result: ValidatedProduct) -> dict:
    """
    Map a validated row to product columns.

    Blank description becomes None. Blank or invalid cost becomes None,
    blank or invalid min stock becomes 0. Fractional stock is truncated.
    """
    row = result.source
    return {
        "name": clean_text(row.name),
        "description": clean_text(row.description),
        "category_id": result.category_id,
        "price": parse_number(row.price),
        "cost": _non_negative(row.cost),
        "stock": _to_int(row.stock),
        "min_stock": _to_int(row.min_stock),
        "is_alcoholic": parse_flag(row.is_alcoholic),
    }


def _non_negative(value) -> Optional[float]:
    number = parse_number(value)
    return number if number is not None and number >= 0 else None


def _to_int(value) -> int:
    number = _non_negative(value)
    return int(number) if number is not None else 0


class ProductImportService:
    """
    Executes the commit pass of an import.

    Handles selection, pass-level name dedup, sequential writes and
    outcome counting.
    """

    def __init__(self):
        self.product_service = get_product_service()

    def select_rows(
        self,
        results: Sequence[ValidatedProduct],
        overrides: ActionOverrideStore,
    ) -> tuple[list[ValidatedProduct], int]:
        """
        Pick the rows to write.

        Keeps valid rows whose effective action is not SKIP, then drops
        every later row whose normalized name was already selected.

        Returns:
            Tuple of (rows to write in file order, rows dropped by name dedup)
        """
        seen_names: set[str] = set()
        selected: list[ValidatedProduct] = []
        deduped = 0

        for result in results:
            if not result.is_valid:
                continue
            if overrides.effective_action(result) is ImportAction.SKIP:
                continue

            name = normalize_name(result.source.name)
            if name in seen_names:
                deduped += 1
                continue
            seen_names.add(name)
            selected.append(result)

        return selected, deduped

    def commit(
        self,
        company_id: str,
        results: Sequence[ValidatedProduct],
        overrides: ActionOverrideStore,
        on_progress: Optional[ProgressCallback] = None,
        on_catalog_changed: Optional[CatalogChangedCallback] = None,
    ) -> ImportOutcome:
        """
        Write the selected rows and count the outcome.

        Args:
            company_id: Tenant the new products belong to
            results: Validation results in file order
            overrides: Operator action choices
            on_progress: Called with (processed, total) after each write attempt
            on_catalog_changed: Called once if at least one write succeeded

        Returns:
            ImportOutcome with created/updated/skipped/errors/invalid counts
        """
        outcome = ImportOutcome()
        selected, deduped = self.select_rows(results, overrides)
        outcome.skipped += deduped
        total = len(selected)

        logger.info(
            "import_commit_started",
            company_id=company_id,
            rows=len(results),
            selected=total,
            deduped=deduped
        )

        for processed, result in enumerate(selected, start=1):
            action = overrides.effective_action(result)
            try:
                self._write_row(company_id, result, action, outcome)
            except Exception as e:
                outcome.errors += 1
                outcome.failed_rows.append(result.row)
                logger.error(
                    "import_row_failed",
                    company_id=company_id,
                    row=result.row,
                    action=action.value,
                    error=str(e),
                    error_type=type(e).__name__
                )

            if on_progress is not None:
                on_progress(processed, total)

        for result in results:
            if not result.is_valid:
                outcome.invalid += 1
            elif overrides.effective_action(result) is ImportAction.SKIP:
                outcome.skipped += 1

        logger.info(
            "import_commit_complete",
            company_id=company_id,
            created=outcome.created,
            updated=outcome.updated,
            skipped=outcome.skipped,
            errors=outcome.errors,
            invalid=outcome.invalid
        )

        if outcome.succeeded > 0 and on_catalog_changed is not None:
            on_catalog_changed(outcome)

        return outcome

    def _write_row(
        self,
        company_id: str,
        result: ValidatedProduct,
        action: ImportAction,
        outcome: ImportOutcome,
    ) -> None:
        fields = build_product_fields(result)

        if action is ImportAction.UPDATE:
            # ActionOverrideStore only allows UPDATE on matched rows
            self.product_service.update(
                result.existing_product_id,
                ProductUpdate(**fields)
            )
            outcome.updated += 1
        else:
            self.product_service.create(company_id, ProductCreate(**fields))
            outcome.created += 1


_product_import_service: Optional[ProductImportService] = None


def get_product_import_service() -> ProductImportService:
    """Get or create ProductImportService instance."""
    global _product_import_service
    if _product_import_service is None:
        _product_import_service = ProductImportService()
    return _product_import_service
