"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────
    POSTGRES_USER: str = "portal_user"
    POSTGRES_PASSWORD: str = "portal_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "employee_portal"

    # Full async URL that replaces the Postgres one (e.g. sqlite+aiosqlite:///portal.db)
    DATABASE_URL_OVERRIDE: str = ""

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Sessions ──────────────────────────────
    SESSION_COOKIE_NAME: str = "portal_session"
    SESSION_TTL_MINUTES: int = 480
    SESSION_COOKIE_SECURE: bool = False

    # ── Bootstrap ─────────────────────────────
    AUTO_CREATE_SCHEMA: bool = True
    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_PASSWORD: str = "admin123"
    SEED_ADMIN_FULL_NAME: str = "System Administrator"
    BCRYPT_ROUNDS: int = 10

    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = ""
    LOG_JSON: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # ── Client ────────────────────────────────
    PORTAL_URL: str = "http://localhost:8000"
    PORTAL_SESSION_FILE: str = "~/.employee_portal_session.json"
    PORTAL_TIMEOUT_SECONDS: float = 10.0

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
