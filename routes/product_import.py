"""
Product import API routes.

Preview-then-confirm flow:
    POST   /preview                            upload + validate, returns a session
    GET    /{session_id}                       current rows, summary, progress
    PUT    /{session_id}/rows/{row}/action     operator override
    DELETE /{session_id}/rows/{row}/action     back to default action
    POST   /{session_id}/commit                sequential writes, returns outcome
    DELETE /{session_id}                       cancel before commit
Nothing is written until /commit is called.
"""

from typing import Literal

from fastapi import APIRouter, File, Form, Path, Query, Response, UploadFile
import structlog

from models.product_import import (
    ActionOverrideRequest,
    ImportOutcome,
    ImportOutcomeResponse,
    ImportRow,
    ImportSessionResponse,
)
from parsers import parse_product_file
from services import import_session_service
from services.import_template_service import (
    TEMPLATE_BASENAME,
    build_template_csv,
    build_template_xlsx,
)
from services.product_import_service import get_product_import_service
from services.product_import_validator import validate_import_rows
from services.reference_data_service import get_reference_data_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()

TEMPLATE_MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@router.get("/template")
async def download_template(
    format: Literal["csv", "xlsx"] = Query("csv", description="Template file format")
):
    """Download an example file with the expected headers and two rows."""
    content = build_template_csv() if format == "csv" else build_template_xlsx()
    return Response(
        content=content,
        media_type=TEMPLATE_MEDIA_TYPES[format],
        headers={
            "Content-Disposition": f'attachment; filename="{TEMPLATE_BASENAME}.{format}"'
        },
    )


@router.post("/preview", response_model=ImportSessionResponse)
async def preview_product_import(
    file: UploadFile = File(..., description="CSV or Excel file with products"),
    company_id: str = Form(..., description="Company the products belong to"),
):
    """
    Parse and validate an upload against the company's catalog.

    Categories and existing products are loaded before any row is
    validated. Returns the session the operator reviews and commits.

    Raises:
        422: Unsupported or unreadable file
    """
    try:
        content = await file.read()
        raw_rows = parse_product_file(file.filename, content)
        rows = [
            ImportRow.from_raw(row_number, raw)
            for row_number, raw in enumerate(raw_rows, start=1)
        ]

        reference = get_reference_data_service().load(company_id)
        results = validate_import_rows(rows, reference)

        session = import_session_service.create_session(
            company_id=company_id,
            filename=file.filename or "",
            rows=rows,
            results=results,
            reference=reference,
        )

        response = session.to_response()
        logger.info(
            "product_import_preview_created",
            session_id=session.id,
            company_id=company_id,
            total=response.summary.total,
            valid=response.summary.valid,
            invalid=response.summary.invalid
        )
        return response

    except Exception as e:
        logger.error("product_import_preview_failed", company_id=company_id, error=str(e))
        return handle_error(e)


@router.get("/{session_id}", response_model=ImportSessionResponse)
async def get_product_import(session_id: str):
    """
    Get the current state of an import.

    During a commit, `progress` reports the fraction of writes attempted.

    Raises:
        404: Session not found or expired
    """
    try:
        return import_session_service.get_session(session_id).to_response()
    except Exception as e:
        return handle_error(e)


@router.put("/{session_id}/rows/{row}/action", response_model=ImportSessionResponse)
async def override_row_action(
    session_id: str,
    data: ActionOverrideRequest,
    row: int = Path(..., ge=1, description="1-based row number"),
):
    """
    Change one row's action (create / update / skip).

    Does not re-validate. Rows with errors stay excluded from the commit.

    Raises:
        404: Session or row not found
        409: Import already committed or running
        422: 'update' on a row without a catalog match
    """
    try:
        session = import_session_service.get_session(session_id)
        session.set_override(row, data.action)
        return session.to_response()
    except Exception as e:
        return handle_error(e)


@router.delete("/{session_id}/rows/{row}/action", response_model=ImportSessionResponse)
async def clear_row_action(
    session_id: str,
    row: int = Path(..., ge=1, description="1-based row number"),
):
    """Drop a row's override so it uses the validator's default action."""
    try:
        session = import_session_service.get_session(session_id)
        session.clear_override(row)
        return session.to_response()
    except Exception as e:
        return handle_error(e)


@router.post("/{session_id}/commit", response_model=ImportOutcomeResponse)
def commit_product_import(session_id: str):
    """
    Write the selected rows.

    Runs to completion once started; individual write failures are
    counted in `errors`, they do not stop the pass. Sync handler, so it
    runs in FastAPI's threadpool while GET /{session_id} reports progress.

    Raises:
        404: Session not found or expired
        409: Session already committed or running
        422: No row selected for create or update
    """
    try:
        service = get_product_import_service()
        session = import_session_service.get_session(session_id)
        session.begin_commit()

        def on_catalog_changed(outcome: ImportOutcome) -> None:
            logger.info(
                "product_catalog_changed",
                company_id=session.company_id,
                created=outcome.created,
                updated=outcome.updated
            )

        try:
            outcome = service.commit(
                session.company_id,
                session.results,
                session.overrides,
                on_progress=session.record_progress,
                on_catalog_changed=on_catalog_changed
            )
        except Exception:
            session.fail()
            raise
        session.complete(outcome)

        return session.to_response().outcome

    except Exception as e:
        logger.error("product_import_commit_failed", session_id=session_id, error=str(e))
        return handle_error(e)


@router.delete("/{session_id}", status_code=204)
async def cancel_product_import(session_id: str):
    """
    Discard an import before it is committed. Nothing is written.

    Raises:
        404: Session not found or expired
        409: Commit in progress
    """
    try:
        import_session_service.delete_session(session_id)
        return Response(status_code=204)
    except Exception as e:
        return handle_error(e)
