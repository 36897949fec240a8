"""
Pydantic schemas for users and authentication.
"""

from pydantic import BaseModel, Field

from auditoiso.schemas.base import CamelModel


class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class UserRecord(CamelModel):
    """A stored user, including the bcrypt hash."""
    id: str
    name: str = ""
    email: str
    password_hash: str = ""
    role: str = "auditor"


class UserOut(BaseModel):
    """Public view of a user."""
    id: str
    name: str
    email: str
    role: str


class TokenResponse(BaseModel):
    token: str
    user: UserOut


class MessageResponse(BaseModel):
    message: str
