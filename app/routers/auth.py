from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.core.limiter import limiter
from app.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, UserResponse
from app.services.auth import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request, login_in: LoginRequest, db: Session = Depends(get_db)
) -> AuthResponse:
    return auth_service.login(login_in, db)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """Current principal"""
    return UserResponse.model_validate(current_user)
