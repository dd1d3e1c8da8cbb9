# app/services/auth.py
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.hasher import PasswordHelper
from app.core.security import jwt_manager
from app.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self):
        self.password_helper = PasswordHelper()

    def login(self, request: LoginRequest, db: Session) -> AuthResponse:
        """Email + password login, returns a bearer access token"""
        user = db.query(User).filter(User.email == request.email.lower()).first()

        if not user or not user.hashed_password:
            logger.warning(f"Login failed for unknown email: {request.email}")
            raise AuthenticationError("Invalid email or password")

        if not self.password_helper.check_password(
            request.password, user.hashed_password
        ):
            logger.warning(f"Login failed for user {user.id}: wrong password")
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthorizationError("Account not found or deactivated")

        login_time = datetime.now(timezone.utc)
        access_token = jwt_manager.create_access_token(user=user, login_time=login_time)

        try:
            user.last_login = login_time
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise

        logger.info(f"User login successful: {user.id} ({user.role})")

        return AuthResponse(
            success=True,
            access_token=access_token,
            token_type="bearer",
            expires_in=int(
                timedelta(hours=settings.jwt_access_expiration).total_seconds()
            ),
            user=UserResponse.model_validate(user),
            message="Login successful",
        )


# Global instance
auth_service = AuthService()
