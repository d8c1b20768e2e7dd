"""
Product API routes.

Catalog CRUD for a company. Bulk loading goes through /api/product-import.
"""

from fastapi import APIRouter, Query, Response
from typing import Optional
import structlog

from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
)
from services.product_service import get_product_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    company_id: str = Query(..., description="Company (tenant) UUID"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    category_id: Optional[str] = Query(None, description="Filter by category"),
    include_inactive: bool = Query(False, description="Include inactive products")
):
    """
    List a company's products.

    Returns paginated list of products.
    """
    try:
        service = get_product_service()

        products, total = service.get_all(
            company_id=company_id,
            page=page,
            page_size=page_size,
            category_id=category_id,
            active_only=not include_inactive
        )

        total_pages = (total + page_size - 1) // page_size

        return ProductListResponse(
            data=products,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages
        )

    except Exception as e:
        return handle_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        return get_product_service().get_by_id(product_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    company_id: str = Query(..., description="Company (tenant) UUID"),
):
    """
    Create a new product.

    Raises:
        422: Validation error
    """
    try:
        return get_product_service().create(company_id, data)
    except Exception as e:
        return handle_error(e)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, data: ProductUpdate):
    """
    Update an existing product. Only provided fields are updated.

    Raises:
        404: Product not found
        422: Validation error
    """
    try:
        return get_product_service().update(product_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str):
    """
    Deactivate a product (soft delete).

    Raises:
        404: Product not found
    """
    try:
        get_product_service().delete(product_id)
        return Response(status_code=204)
    except Exception as e:
        return handle_error(e)
