"""
User Store - user records and the default admin bootstrap.
"""
import uuid
from typing import Optional

from auditoiso.config import settings
from auditoiso.db import Database, get_db
from auditoiso.logger import logger
from auditoiso.schemas.auth import UserRecord
from auditoiso.services.auth import hash_password

DEFAULT_ADMIN_ID = "u-1"


class UserExists(Exception):
    """Raised on signup with an email that is already registered."""


class UserStore:
    """User persistence on top of the ``users`` collection."""

    def __init__(self, db: Database = None):
        self.db = db or get_db()

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        for record in self.db.users.all():
            if record.get("email") == email:
                return UserRecord.model_validate(record)
        return None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        for record in self.db.users.all():
            if record.get("id") == user_id:
                return UserRecord.model_validate(record)
        return None

    def create(self, name: str, email: str, password: str, role: str = "auditor") -> UserRecord:
        user = UserRecord(
            id=f"u-{uuid.uuid4().hex[:12]}",
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=role,
        )

        def append(records):
            # checked under the collection lock so concurrent signups cannot both win
            if any(r.get("email") == email for r in records):
                raise UserExists(email)
            records.append(user.to_record())

        self.db.users.update(append)
        logger.info(f"Created user {user.id} with role {role}")
        return user


def ensure_default_admin(store: UserStore) -> bool:
    """Make sure the datastore has a usable admin account.

    Creates the default admin when there are no users, and fills in a
    password hash for the first user if it has none. Safe to call repeatedly.
    Returns True when something was written.
    """
    changed = False

    def bootstrap(records):
        nonlocal changed
        if not records:
            admin = UserRecord(
                id=DEFAULT_ADMIN_ID,
                name="Admin",
                email=settings.DEFAULT_ADMIN_EMAIL,
                password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
                role="admin",
            )
            records.append(admin.to_record())
            changed = True
            logger.info(f"Default admin user created: {settings.DEFAULT_ADMIN_EMAIL}")
        elif not records[0].get("passwordHash"):
            records[0]["passwordHash"] = hash_password(settings.DEFAULT_ADMIN_PASSWORD)
            changed = True
            logger.info(f"Default password set for user {records[0].get('id')}")

    records = store.db.users.all()
    if records and records[0].get("passwordHash"):
        return False
    store.db.users.update(bootstrap)
    return changed
