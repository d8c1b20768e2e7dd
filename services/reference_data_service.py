"""
Reference data for product imports.

Loads the tenant's active categories and existing product names in one
go, before validation. A failed read is logged and replaced by an empty
collection so the import can still show a (degraded) preview.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.product_import import Category, ExistingProduct, ReferenceData

logger = structlog.get_logger(__name__)


class ReferenceDataService:
    """Reads the catalog snapshot an import is validated against."""

    def __init__(self):
        self.db = get_supabase_client()

    def load(self, company_id: str) -> ReferenceData:
        """
        Load categories and existing products for a company.

        Never raises for backend failures; see ReferenceData.errors.
        """
        logger.info("loading_import_reference_data", company_id=company_id)

        errors: list[str] = []

        try:
            categories = self._load_categories(company_id)
        except Exception as e:
            logger.error("load_categories_failed", company_id=company_id, error=str(e))
            errors.append(f"No se pudieron cargar las categorías: {e}")
            categories = []

        try:
            products = self._load_products(company_id)
        except Exception as e:
            logger.error("load_existing_products_failed", company_id=company_id, error=str(e))
            errors.append(f"No se pudieron cargar los productos existentes: {e}")
            products = []

        reference = ReferenceData(
            company_id=company_id,
            categories=tuple(categories),
            products=tuple(products),
            errors=tuple(errors),
        )

        logger.info(
            "import_reference_data_loaded",
            company_id=company_id,
            categories=len(reference.categories),
            products=len(reference.products),
            degraded=reference.degraded
        )

        return reference

    def _load_categories(self, company_id: str) -> list[Category]:
        result = (
            self.db.table("categories")
            .select("id, name")
            .eq("company_id", company_id)
            .eq("is_active", True)
            .execute()
        )
        return [
            Category(id=str(row["id"]), name=row["name"])
            for row in result.data or []
            if row.get("name") is not None
        ]

    def _load_products(self, company_id: str) -> list[ExistingProduct]:
        result = (
            self.db.table("products")
            .select("id, name")
            .eq("company_id", company_id)
            .execute()
        )
        return [
            ExistingProduct(id=str(row["id"]), name=row["name"])
            for row in result.data or []
            if row.get("name") is not None
        ]


_reference_data_service: Optional[ReferenceDataService] = None


def get_reference_data_service() -> ReferenceDataService:
    """Get or create ReferenceDataService instance."""
    global _reference_data_service
    if _reference_data_service is None:
        _reference_data_service = ReferenceDataService()
    return _reference_data_service
