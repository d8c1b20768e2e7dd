"""
Product service for catalog operations.

Every read is scoped to a company (tenant). Writes by id rely on the
id having been resolved within the tenant beforehand.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from exceptions import (
    ProductNotFoundError,
    DatabaseError
)

logger = structlog.get_logger(__name__)


class ProductService:
    """
    Product business logic.

    Handles CRUD operations for products.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "products"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        company_id: str,
        page: int = 1,
        page_size: int = 20,
        category_id: Optional[str] = None,
        active_only: bool = True
    ) -> tuple[list[ProductResponse], int]:
        """
        Get a company's products with optional filters.

        Args:
            company_id: Tenant UUID
            page: Page number (1-indexed)
            page_size: Items per page
            category_id: Filter by category
            active_only: Only return active products

        Returns:
            Tuple of (products list, total count)
        """
        logger.info(
            "getting_products",
            company_id=company_id,
            page=page,
            page_size=page_size,
            category_id=category_id
        )

        try:
            query = (
                self.db.table(self.table)
                .select("*", count="exact")
                .eq("company_id", company_id)
            )

            if active_only:
                query = query.eq("is_active", True)
            if category_id:
                query = query.eq("category_id", category_id)

            offset = (page - 1) * page_size
            query = query.range(offset, offset + page_size - 1)
            query = query.order("name")

            result = query.execute()

            products = [ProductResponse(**row) for row in result.data]
            total = result.count or 0

            logger.info(
                "products_retrieved",
                count=len(products),
                total=total
            )

            return products, total

        except Exception as e:
            logger.error(
                "get_products_failed",
                company_id=company_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_by_id(self, product_id: str) -> ProductResponse:
        """
        Get a single product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .single()
                .execute()
            )

            if not result.data:
                raise ProductNotFoundError(product_id)

            return ProductResponse(**result.data)

        except ProductNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_product_failed",
                product_id=product_id,
                error=str(e)
            )
            # PostgREST reports a missing row on .single() as an error
            if "0 rows" in str(e) or "no rows" in str(e).lower():
                raise ProductNotFoundError(product_id)
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, company_id: str, data: ProductCreate) -> ProductResponse:
        """
        Create a new active product for a company.

        Returns:
            Created ProductResponse
        """
        logger.info("creating_product", company_id=company_id, name=data.name)

        try:
            insert_data = {
                **data.model_dump(),
                "company_id": company_id,
                "is_active": True
            }

            result = (
                self.db.table(self.table)
                .insert(insert_data)
                .execute()
            )

            product = ProductResponse(**result.data[0])

            logger.info(
                "product_created",
                product_id=product.id,
                name=product.name
            )

            return product

        except Exception as e:
            logger.error(
                "create_product_failed",
                company_id=company_id,
                name=data.name,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

    def update(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        """
        Update an existing product.

        Writes every field that was set on `data`, including explicit None.

        Raises:
            ProductNotFoundError: If no row has this id
        """
        logger.info("updating_product", product_id=product_id)

        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return self.get_by_id(product_id)

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            logger.error(
                "update_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))

        if not result.data:
            raise ProductNotFoundError(product_id)

        product = ProductResponse(**result.data[0])

        logger.info(
            "product_updated",
            product_id=product_id,
            fields=list(update_data.keys())
        )

        return product

    def delete(self, product_id: str) -> bool:
        """
        Soft delete a product (set is_active=False).

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("deleting_product", product_id=product_id)

        self.get_by_id(product_id)

        try:
            self.db.table(self.table).update(
                {"is_active": False}
            ).eq("id", product_id).execute()

            logger.info("product_deleted", product_id=product_id)

            return True

        except Exception as e:
            logger.error(
                "delete_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise DatabaseError("update", str(e))


# Singleton instance for convenience
_product_service: Optional[ProductService] = None


def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
