"""
Report endpoints - PDF export of a stored audit.
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from auditoiso.api.deps import get_audit_store, get_pdf_generator
from auditoiso.config import settings
from auditoiso.logger import logger
from auditoiso.services.audit_store import AuditNotFound, AuditStore
from auditoiso.services.auth import CurrentUser, get_current_user
from auditoiso.services.pdf_generator import (
    PdfGenerator,
    RenderFailure,
    attachment_filename,
    content_disposition,
)

router = APIRouter(tags=["Reports"])


@router.get("/{audit_id}/pdf")
async def get_audit_pdf(
    audit_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: AuditStore = Depends(get_audit_store),
    generator: PdfGenerator = Depends(get_pdf_generator),
):
    """Get audit report as PDF."""
    try:
        audit = await run_in_threadpool(store.get_by_id, audit_id)
    except AuditNotFound:
        raise HTTPException(status_code=404, detail="No encontrado")

    if settings.REPORT_OWNER_CHECK and audit.created_by != user.id:
        logger.warning(f"User {user.id} requested report for audit {audit_id} owned by {audit.created_by}")
        raise HTTPException(status_code=404, detail="No encontrado")

    try:
        pdf_bytes = await run_in_threadpool(generator.generate, audit)
    except RenderFailure:
        logger.exception(f"Report for audit {audit_id} failed")
        raise HTTPException(status_code=500, detail="Error generando PDF")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": content_disposition(attachment_filename(audit))
        }
    )
