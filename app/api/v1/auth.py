"""Auth endpoints: register, login, refresh, forgot/reset password."""

from fastapi import APIRouter, HTTPException, status

from app.dependencies import DbSession
from app.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    RefreshRequest,
    ResetPasswordRequest,
    TokenPair,
    UserResponse,
)
from app.services.auth_service import (
    register as do_register,
    login as do_login,
    refresh_tokens,
    request_password_reset,
    reset_password as do_reset_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user, access: str, refresh: str) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenPair(accessToken=access, refreshToken=refresh),
    )


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    db: DbSession,
):
    """Create an account. The welcome email is sent in the background."""
    try:
        user, access, refresh = do_register(
            db, email=body.email, password=body.password, name=body.fullName
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _auth_response(user, access, refresh)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: DbSession,
):
    try:
        user, access, refresh = do_login(db, email=body.email, password=body.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return _auth_response(user, access, refresh)


@router.post("/refresh", response_model=TokenPair)
def refresh(
    body: RefreshRequest,
    db: DbSession,
):
    try:
        _, access, refresh = refresh_tokens(db, body.refreshToken)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return TokenPair(accessToken=access, refreshToken=refresh)


@router.post("/forgot-password")
def forgot_password(
    body: ForgotPasswordRequest,
    db: DbSession,
):
    """Request password reset email. Always returns 200 to avoid user enumeration."""
    request_password_reset(db, body.email)
    return {"ok": True}


@router.post("/reset-password")
def reset_password_route(
    body: ResetPasswordRequest,
    db: DbSession,
):
    """Set new password using reset token (single-use)."""
    try:
        do_reset_password(db, body.token, body.newPassword)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"ok": True}
