"""
FastAPI dependency providers.
"""
from typing import Optional

from auditoiso.db import get_db
from auditoiso.services.audit_store import AuditStore
from auditoiso.services.checklists import ChecklistService
from auditoiso.services.pdf_generator import PdfGenerator
from auditoiso.services.user_store import UserStore


def get_audit_store() -> AuditStore:
    return AuditStore(get_db())


def get_user_store() -> UserStore:
    return UserStore(get_db())


def get_checklist_service() -> ChecklistService:
    return ChecklistService(get_db())


_pdf_generator: Optional[PdfGenerator] = None


def get_pdf_generator() -> PdfGenerator:
    """Shared generator; the report timezone is resolved once per process."""
    global _pdf_generator
    if _pdf_generator is None:
        _pdf_generator = PdfGenerator()
    return _pdf_generator
