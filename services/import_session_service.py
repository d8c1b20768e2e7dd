"""
In-memory import sessions.

One session holds everything a single product import needs between the
upload and the commit: parsed rows, validation results, operator
overrides, step, progress and outcome. Entries expire after a TTL.
Single-process only.

The commit route runs on the threadpool while the other routes run on
the event loop, so step transitions and the store go through `_lock`.
"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
import structlog

from config import settings
from exceptions import (
    ImportSessionNotFoundError,
    ImportSessionStateError,
    NothingToImportError,
)
from models.product_import import (
    DuplicateType,
    ImportAction,
    ImportOutcome,
    ImportOutcomeResponse,
    ImportRow,
    ImportRowResponse,
    ImportSessionResponse,
    ImportStep,
    ImportSummary,
    ReferenceData,
    ValidatedProduct,
)
from services.import_overrides import ActionOverrideStore

logger = structlog.get_logger(__name__)

NO_CATEGORIES_WARNING = (
    "No hay categorías activas. Debes crear al menos una categoría antes de importar productos."
)

# Guards session steps, overrides and the _sessions dict
_lock = threading.Lock()


@dataclass
class ImportSession:
    """State of one import, from preview to completion."""
    id: str
    company_id: str
    filename: str
    rows: list[ImportRow]
    results: list[ValidatedProduct]
    reference: ReferenceData
    overrides: ActionOverrideStore
    expires_at: datetime
    created_at: datetime = field(default_factory=datetime.now)
    step: ImportStep = ImportStep.PREVIEW
    progress: float = 0.0
    outcome: Optional[ImportOutcome] = None

    # ===================
    # STEP TRANSITIONS
    # ===================

    def ensure_step(self, step: ImportStep, operation: str) -> None:
        if self.step is not step:
            raise ImportSessionStateError(self.id, self.step.value, operation)

    def set_override(self, row: int, action: ImportAction) -> ImportAction:
        """Override one row's action; only while in preview."""
        with _lock:
            self.ensure_step(ImportStep.PREVIEW, "override")
            return self.overrides.set(row, action)

    def clear_override(self, row: int) -> None:
        with _lock:
            self.ensure_step(ImportStep.PREVIEW, "override")
            self.overrides.clear(row)

    def begin_commit(self) -> None:
        """
        Move preview -> importing.

        Check and transition are atomic: of two concurrent calls, exactly
        one succeeds and the other raises ImportSessionStateError.

        Raises:
            ImportSessionStateError: Not in preview
            NothingToImportError: No row would be created or updated
        """
        with _lock:
            self.ensure_step(ImportStep.PREVIEW, "commit")
            if not self.summary().can_commit:
                raise NothingToImportError(self.id)
            self.step = ImportStep.IMPORTING
            self.progress = 0.0

    def record_progress(self, processed: int, total: int) -> None:
        self.progress = processed / total if total else 1.0

    def complete(self, outcome: ImportOutcome) -> None:
        """Move importing -> complete."""
        with _lock:
            self.outcome = outcome
            self.progress = 1.0
            self.step = ImportStep.COMPLETE

    def fail(self) -> None:
        """
        Move importing -> failed after the commit pass itself raised.

        Terminal: the session can be read, cancelled or left to expire,
        never committed again (some rows may already be written).
        """
        with _lock:
            self.step = ImportStep.FAILED
        logger.error("import_session_failed", session_id=self.id, progress=self.progress)

    # ===================
    # VIEWS
    # ===================

    def summary(self) -> ImportSummary:
        """Counts for the preview header; actions count valid rows only."""
        summary = ImportSummary(total=len(self.results))
        for result in self.results:
            if result.duplicate_type is DuplicateType.WITHIN_FILE:
                summary.duplicates_in_file += 1
            elif result.duplicate_type is DuplicateType.AGAINST_CATALOG:
                summary.duplicates_in_catalog += 1

            if not result.is_valid:
                summary.invalid += 1
                continue

            summary.valid += 1
            action = self.overrides.effective_action(result)
            if action is ImportAction.CREATE:
                summary.to_create += 1
            elif action is ImportAction.UPDATE:
                summary.to_update += 1
            else:
                summary.to_skip += 1

        summary.can_commit = summary.to_create + summary.to_update > 0
        return summary

    def warnings(self) -> list[str]:
        warnings = list(self.reference.errors)
        if not self.reference.categories:
            warnings.append(NO_CATEGORIES_WARNING)
        invalid = sum(1 for r in self.results if not r.is_valid)
        if invalid:
            warnings.append(
                f"Hay {invalid} fila{'s' if invalid != 1 else ''} con errores. "
                "Solo se importarán los productos válidos."
            )
        return warnings

    def to_response(self) -> ImportSessionResponse:
        outcome = None
        if self.outcome is not None:
            outcome = ImportOutcomeResponse(
                created=self.outcome.created,
                updated=self.outcome.updated,
                skipped=self.outcome.skipped,
                errors=self.outcome.errors,
                invalid=self.outcome.invalid,
                failed_rows=list(self.outcome.failed_rows),
                catalog_changed=self.outcome.succeeded > 0,
            )

        remaining = max(0, int((self.expires_at - datetime.now()).total_seconds() // 60))

        return ImportSessionResponse(
            session_id=self.id,
            company_id=self.company_id,
            filename=self.filename,
            step=self.step,
            progress=self.progress,
            summary=self.summary(),
            warnings=self.warnings(),
            rows=[self._row_response(r) for r in self.results],
            outcome=outcome,
            expires_in_minutes=remaining,
        )

    def _row_response(self, result: ValidatedProduct) -> ImportRowResponse:
        row = result.source
        return ImportRowResponse(
            row=row.row,
            name=row.name,
            description=row.description,
            category=row.category,
            price=row.price,
            cost=row.cost,
            stock=row.stock,
            min_stock=row.min_stock,
            is_alcoholic=row.is_alcoholic,
            is_valid=result.is_valid,
            errors=list(result.errors),
            warnings=list(result.warnings),
            category_id=result.category_id,
            duplicate_type=result.duplicate_type,
            existing_product_id=result.existing_product_id,
            default_action=result.default_action,
            action=self.overrides.effective_action(result),
            overridden=result.row in self.overrides,
        )


# ===================
# SESSION STORE
# ===================

_sessions: dict[str, ImportSession] = {}


def create_session(
    company_id: str,
    filename: str,
    rows: list[ImportRow],
    results: list[ValidatedProduct],
    reference: ReferenceData,
    ttl_minutes: Optional[int] = None,
) -> ImportSession:
    """Store a freshly validated import and return it."""
    ttl = ttl_minutes if ttl_minutes is not None else settings.import_session_ttl_minutes
    session = ImportSession(
        id=str(uuid.uuid4()),
        company_id=company_id,
        filename=filename,
        rows=rows,
        results=results,
        reference=reference,
        overrides=ActionOverrideStore(results),
        expires_at=datetime.now() + timedelta(minutes=ttl),
    )
    with _lock:
        _sessions[session.id] = session
    _cleanup_expired()

    logger.info(
        "import_session_created",
        session_id=session.id,
        company_id=company_id,
        rows=len(rows)
    )
    return session


def get_session(session_id: str) -> ImportSession:
    """
    Retrieve a session.

    Raises:
        ImportSessionNotFoundError: Unknown or expired id
    """
    with _lock:
        return _get_live_session(session_id)


def delete_session(session_id: str) -> None:
    """
    Cancel or discard a session.

    Raises:
        ImportSessionNotFoundError: Unknown or expired id
        ImportSessionStateError: Commit in progress
    """
    with _lock:
        session = _get_live_session(session_id)
        if session.step is ImportStep.IMPORTING:
            raise ImportSessionStateError(session_id, session.step.value, "cancel")
        del _sessions[session_id]
    logger.info("import_session_deleted", session_id=session_id, step=session.step.value)


def clear_sessions() -> None:
    """Drop every session."""
    with _lock:
        _sessions.clear()


def _cleanup_expired() -> None:
    """Remove all expired entries."""
    now = datetime.now()
    with _lock:
        expired = [k for k, s in _sessions.items() if _is_expired(s, now)]
        for k in expired:
            del _sessions[k]


def _get_live_session(session_id: str) -> ImportSession:
    # Caller holds _lock
    session = _sessions.get(session_id)
    if session is None:
        raise ImportSessionNotFoundError(session_id)
    if _is_expired(session, datetime.now()):
        del _sessions[session_id]
        raise ImportSessionNotFoundError(session_id)
    return session


def _is_expired(session: ImportSession, now: datetime) -> bool:
    # A running commit keeps its session alive
    return session.step is not ImportStep.IMPORTING and now > session.expires_at
