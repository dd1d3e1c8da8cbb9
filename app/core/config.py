from typing import List

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="LMS Quiz Engine")
    app_description: str = Field(
        default="Learning Management System - quizzes, scoring and approvals"
    )
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:8000")
    frontend_url: str = Field(default="http://localhost:3000")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)
    timezone: str = Field(default="UTC")

    # Database Configuration
    db_connection: str = Field(default="postgresql")
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="lms")
    db_username: str = Field(default="lms")
    db_password: str = Field(default="lms")
    # Full URL override (e.g. sqlite:// for tests)
    database_url: str = Field(default="")

    # Security Settings
    cors_allowed_origins: List[str] = Field(default=["http://localhost:3000"])
    password_hash_rounds: int = Field(default=12)

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_expiration: int = Field(default=8)  # hours
    jwt_issuer: str = Field(default="LMS Quiz Engine")

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Admin Defaults
    admin_default_name: str = Field(default="Super Admin")
    admin_default_email: str = Field(default="admin@example.com")
    admin_default_password: str = Field(default="Admin@123")

    # Authorization
    authorization_roles: List[str] = Field(
        default=["employee", "manager", "instructor", "admin"]
    )
    authorization_default_role: str = Field(default="employee")
    staff_roles: List[str] = Field(default=["admin", "instructor", "manager"])
    authoring_roles: List[str] = Field(default=["admin", "instructor"])

    # Quiz
    quiz_default_passing_score: int = Field(default=60, ge=0, le=100)
    quiz_require_course_completion: bool = Field(default=False)

    # Redis (rate limiter storage, memory:// is accepted)
    redis_url: str = Field(default="redis://localhost:6379")
    redis_rate_limit: str = Field(default="100/minute")
    login_rate_limit: str = Field(default="10/minute")

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("authorization_roles", mode="before")
    def validate_roles(cls, v):
        return cls._parse_csv(v, ["employee", "manager", "instructor", "admin"])

    @field_validator("staff_roles", mode="before")
    def validate_staff_roles(cls, v):
        return cls._parse_csv(v, ["admin", "instructor", "manager"])

    @field_validator("authoring_roles", mode="before")
    def validate_authoring_roles(cls, v):
        return cls._parse_csv(v, ["admin", "instructor"])

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:3000"])

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
