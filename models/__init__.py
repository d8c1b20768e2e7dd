"""
Pydantic models and reconciliation records.
"""

from models.base import BaseSchema, TimestampMixin
from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
)
from models.product_import import (
    IMPORT_COLUMNS,
    TRUTHY_TOKENS,
    RawValue,
    ImportAction,
    DuplicateType,
    ImportStep,
    ImportRow,
    Category,
    ExistingProduct,
    ReferenceData,
    ValidatedProduct,
    ImportOutcome,
    ImportRowResponse,
    ImportSummary,
    ImportOutcomeResponse,
    ImportSessionResponse,
    ActionOverrideRequest,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",

    # Product import
    "IMPORT_COLUMNS",
    "TRUTHY_TOKENS",
    "RawValue",
    "ImportAction",
    "DuplicateType",
    "ImportStep",
    "ImportRow",
    "Category",
    "ExistingProduct",
    "ReferenceData",
    "ValidatedProduct",
    "ImportOutcome",
    "ImportRowResponse",
    "ImportSummary",
    "ImportOutcomeResponse",
    "ImportSessionResponse",
    "ActionOverrideRequest",
]
