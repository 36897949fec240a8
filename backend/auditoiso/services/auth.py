"""
Authentication - bcrypt password hashes and HS256 bearer tokens.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from auditoiso.config import settings
from auditoiso.logger import logger

security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """The authenticated caller, as carried by the token."""
    id: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in storage
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(user_id: str, expires_hours: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(hours=expires_hours or settings.JWT_EXPIRES_HOURS)
    payload = {"userId": user_id, "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id in ``token``; raises JWTError when invalid or expired."""
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    user_id = payload.get("userId")
    if not user_id:
        raise JWTError("token has no userId")
    return user_id


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """FastAPI dependency resolving the bearer token to a user."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="No token")
    try:
        return CurrentUser(id=decode_access_token(credentials.credentials))
    except JWTError:
        raise HTTPException(status_code=401, detail="Token inválido")
