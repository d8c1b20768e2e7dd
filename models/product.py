"""
Product schemas for validation and serialization.

Products belong to one company (tenant) and one category.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema, TimestampMixin


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: name, category_id, price
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Product name",
        examples=["Café Americano", "Cerveza Corona"]
    )
    description: Optional[str] = Field(None, description="Free-text description")
    category_id: str = Field(..., description="Category UUID")
    price: float = Field(..., gt=0, description="Sale price")
    cost: Optional[float] = Field(None, ge=0, description="Unit cost")
    stock: int = Field(default=0, ge=0, description="Units on hand")
    min_stock: int = Field(default=0, ge=0, description="Low-stock alert threshold")
    is_alcoholic: bool = Field(default=False, description="Requires age check at sale")


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only fields that were set are written,
    including fields explicitly set to None.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    cost: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    is_alcoholic: Optional[bool] = None
    is_active: Optional[bool] = None


class ProductResponse(BaseSchema, TimestampMixin):
    """
    Product response with all fields.

    Used for GET responses.
    """

    id: str = Field(..., description="Product UUID")
    company_id: str = Field(..., description="Owning company UUID")
    name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    price: float
    cost: Optional[float] = None
    stock: int = 0
    min_stock: int = 0
    is_alcoholic: bool = False
    is_active: bool = True


class ProductListResponse(BaseSchema):
    """List of products with pagination."""

    data: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
