"""
Audit Record Store - create, list and fetch audits.

Audits are immutable once created: there is no update or delete.
"""
import uuid
from datetime import datetime, timezone
from typing import List

from auditoiso.config import settings
from auditoiso.db import Database, get_db
from auditoiso.logger import logger
from auditoiso.schemas.audit import Audit, AuditCreate
from auditoiso.services.scoring import score_mismatches
from auditoiso.timestamps import instant_key


class AuditNotFound(Exception):
    """Raised when an audit id does not resolve."""

    def __init__(self, audit_id: str):
        super().__init__(f"Audit {audit_id} not found")
        self.audit_id = audit_id


class ScoreMismatch(ValueError):
    """Raised on inconsistent scores when SCORE_MISMATCH_POLICY is 'reject'."""

    def __init__(self, problems: List[str]):
        super().__init__("score does not match checklist: " + ", ".join(problems))
        self.problems = problems


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sort_key(audit: Audit):
    return instant_key(audit.created_at)


def _to_audit(record: dict) -> Audit:
    # records from the first backend carry only `_id`
    if not record.get("id") and record.get("_id"):
        record = {**record, "id": record["_id"]}
    return Audit.model_validate(record)


class AuditStore:
    """Audit persistence on top of the ``audits`` collection."""

    def __init__(self, db: Database = None, mismatch_policy: str = None):
        self.db = db or get_db()
        self.mismatch_policy = mismatch_policy or settings.SCORE_MISMATCH_POLICY

    def _load(self) -> List[Audit]:
        return [_to_audit(record) for record in self.db.audits.all() if isinstance(record, dict)]

    def list_by_owner(self, owner_id: str) -> List[Audit]:
        """Audits created by ``owner_id``, newest first."""
        owned = [a for a in self._load() if a.created_by == owner_id]
        return sorted(owned, key=_sort_key, reverse=True)

    def create(self, payload: AuditCreate, owner_id: str) -> Audit:
        """Persist a submitted audit, assigning id and timestamps.

        The submitted score is stored as given.
        """
        problems = score_mismatches(payload.checklist, payload.score)
        if problems:
            if self.mismatch_policy == "reject":
                logger.warning(f"Rejected audit '{payload.name}': {', '.join(problems)}")
                raise ScoreMismatch(problems)
            logger.warning(f"Audit '{payload.name}' stored with inconsistent score: {', '.join(problems)}")

        created_at = _utcnow_iso()
        record = payload.to_record()
        record.update(
            id=f"a-{uuid.uuid4().hex[:12]}",
            notes=payload.notes or "",
            auditor=payload.auditor or "",
            createdAtAudit=payload.created_at_audit or created_at,
            createdAt=created_at,
            createdBy=owner_id,
        )
        audit = Audit.model_validate(record)

        def prepend(records):
            records.insert(0, audit.to_record())

        self.db.audits.update(prepend)
        logger.info(f"Created audit {audit.id} ({audit.standard or '-'}) for {owner_id}")
        return audit

    def get_by_id(self, audit_id: str) -> Audit:
        """Resolve one audit; ownership is not checked here."""
        for record in self.db.audits.all():
            if isinstance(record, dict) and (record.get("id") or record.get("_id")) == audit_id:
                return _to_audit(record)
        raise AuditNotFound(audit_id)
