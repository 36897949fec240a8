"""
Login and signup endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException

from auditoiso.api.deps import get_user_store
from auditoiso.logger import logger
from auditoiso.schemas.auth import LoginRequest, MessageResponse, SignupRequest, TokenResponse, UserOut
from auditoiso.services.auth import create_access_token, verify_password
from auditoiso.services.user_store import UserExists, UserStore

router = APIRouter(tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, users: UserStore = Depends(get_user_store)):
    """Exchange email and password for a bearer token."""
    user = users.get_by_email(request.email)
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info(f"Failed login for {request.email}")
        raise HTTPException(status_code=400, detail="Credenciales inválidas")

    token = create_access_token(user.id)
    return TokenResponse(
        token=token,
        user=UserOut(id=user.id, name=user.name, email=user.email, role=user.role)
    )


@router.post("/signup", response_model=MessageResponse, status_code=201)
def signup(request: SignupRequest, users: UserStore = Depends(get_user_store)):
    """Register a new auditor account."""
    try:
        users.create(request.name, request.email, request.password)
    except UserExists:
        raise HTTPException(status_code=400, detail="Usuario ya existe")
    return MessageResponse(message="Usuario creado")
