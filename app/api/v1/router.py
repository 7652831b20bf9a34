"""API v1 router: include all route modules, GET /me, PATCH /me."""

from fastapi import APIRouter

from app.api.v1 import auth, scripts
from app.dependencies import CurrentUser, DbSession
from app.schemas.auth import MeUpdateRequest, UserResponse

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(scripts.router)


@api_router.get("/me")
def me(user: CurrentUser):
    """Return the signed-in user."""
    return {"user": UserResponse.model_validate(user)}


@api_router.patch("/me", response_model=dict)
def update_me(
    body: MeUpdateRequest,
    db: DbSession,
    user: CurrentUser,
):
    """Update current user profile (e.g. name)."""
    if body.name is not None:
        user.name = body.name
        db.commit()
        db.refresh(user)
    return {"user": UserResponse.model_validate(user)}
