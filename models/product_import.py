"""
Product import schemas.

Records produced while reconciling an uploaded product file against the
tenant catalog (frozen dataclasses), plus the API payloads for the
preview / override / commit flow (pydantic).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Union

from pydantic import Field

from models.base import BaseSchema


RawValue = Optional[Union[bool, int, float, str]]


# Header -> ImportRow attribute. Headers are matched verbatim.
IMPORT_COLUMNS: dict[str, str] = {
    "nombre": "name",
    "descripcion": "description",
    "categoria": "category",
    "precio": "price",
    "costo": "cost",
    "stock": "stock",
    "stock_minimo": "min_stock",
    "es_alcoholico": "is_alcoholic",
}

TRUTHY_TOKENS = frozenset({"true", "sí", "si", "1"})


class ImportAction(str, Enum):
    """What the commit pass does with a row."""
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class DuplicateType(str, Enum):
    """Name collision found during validation."""
    NONE = "none"
    WITHIN_FILE = "within_file"
    AGAINST_CATALOG = "against_catalog"


class ImportStep(str, Enum):
    """Lifecycle of an import session."""
    PREVIEW = "preview"
    IMPORTING = "importing"
    COMPLETE = "complete"
    FAILED = "failed"


# ===================
# RECONCILIATION RECORDS
# ===================

@dataclass(frozen=True)
class ImportRow:
    """One candidate product exactly as it appeared in the file."""
    row: int
    name: RawValue = None
    description: RawValue = None
    category: RawValue = None
    price: RawValue = None
    cost: RawValue = None
    stock: RawValue = None
    min_stock: RawValue = None
    is_alcoholic: RawValue = None

    @classmethod
    def from_raw(cls, row: int, raw: Mapping[str, RawValue]) -> "ImportRow":
        """Build from a parsed file row; unknown headers are ignored."""
        values = {
            attr: raw.get(header)
            for header, attr in IMPORT_COLUMNS.items()
        }
        return cls(row=row, **values)


@dataclass(frozen=True)
class Category:
    """Category reference used to resolve the categoria column."""
    id: str
    name: str


@dataclass(frozen=True)
class ExistingProduct:
    """Catalog product reference used for duplicate-name matching."""
    id: str
    name: str


@dataclass(frozen=True)
class ReferenceData:
    """Snapshot of the tenant catalog taken before validation."""
    company_id: str
    categories: tuple[Category, ...] = ()
    products: tuple[ExistingProduct, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        """True if any reference read failed and defaulted to empty."""
        return len(self.errors) > 0


@dataclass(frozen=True)
class ValidatedProduct:
    """
    Validation result for one ImportRow.

    Read-only. The operator's choice of action lives in
    ActionOverrideStore, never here.
    """
    source: ImportRow
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    category_id: Optional[str] = None
    duplicate_type: DuplicateType = DuplicateType.NONE
    existing_product_id: Optional[str] = None
    default_action: ImportAction = ImportAction.CREATE

    @property
    def row(self) -> int:
        return self.source.row

    @property
    def is_valid(self) -> bool:
        """True if the row has no blocking errors."""
        return len(self.errors) == 0


@dataclass
class ImportOutcome:
    """Aggregate counters of one commit pass."""
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    invalid: int = 0
    failed_rows: list[int] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.created + self.updated


# ===================
# API SCHEMAS
# ===================

class ImportRowResponse(BaseSchema):
    """One row of the import preview."""

    row: int = Field(..., description="1-based row number in the file")
    name: RawValue = None
    description: RawValue = None
    category: RawValue = None
    price: RawValue = None
    cost: RawValue = None
    stock: RawValue = None
    min_stock: RawValue = None
    is_alcoholic: RawValue = None
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    duplicate_type: DuplicateType = DuplicateType.NONE
    existing_product_id: Optional[str] = None
    default_action: ImportAction
    action: ImportAction = Field(..., description="Effective action (override or default)")
    overridden: bool = False


class ImportSummary(BaseSchema):
    """Counts shown above the preview table."""

    total: int = 0
    valid: int = 0
    invalid: int = 0
    duplicates_in_file: int = 0
    duplicates_in_catalog: int = 0
    to_create: int = 0
    to_update: int = 0
    to_skip: int = 0
    can_commit: bool = False


class ImportOutcomeResponse(BaseSchema):
    """Result of a commit pass."""

    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    invalid: int = 0
    failed_rows: list[int] = Field(default_factory=list)
    catalog_changed: bool = False


class ImportSessionResponse(BaseSchema):
    """Full state of an import session."""

    session_id: str
    company_id: str
    filename: str
    step: ImportStep
    progress: float = Field(0.0, ge=0, le=1, description="Fraction of commit writes attempted")
    summary: ImportSummary
    warnings: list[str] = Field(default_factory=list)
    rows: list[ImportRowResponse] = Field(default_factory=list)
    outcome: Optional[ImportOutcomeResponse] = None
    expires_in_minutes: int = 30


class ActionOverrideRequest(BaseSchema):
    """Operator override for a single row."""

    action: ImportAction
