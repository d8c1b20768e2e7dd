"""
Business logic services.

Each service handles one domain area.
"""

from services.product_service import ProductService, get_product_service
from services.reference_data_service import (
    ReferenceDataService,
    get_reference_data_service,
)
from services.product_import_service import (
    ProductImportService,
    get_product_import_service,
    build_product_fields,
)
from services.product_import_validator import validate_import_rows
from services.import_overrides import ActionOverrideStore

__all__ = [
    "ProductService",
    "get_product_service",
    "ReferenceDataService",
    "get_reference_data_service",
    "ProductImportService",
    "get_product_import_service",
    "build_product_fields",
    "validate_import_rows",
    "ActionOverrideStore",
]
