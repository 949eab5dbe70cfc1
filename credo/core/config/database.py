"""
Database connection settings.
"""
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """
    Defines settings for connecting to the accounts database.

    Either DATABASE_URL is given explicitly (any SQLAlchemy async URL, e.g.
    ``sqlite+aiosqlite:///./credo.db``) or it is assembled from the
    POSTGRES_* parts as a ``postgresql+asyncpg`` URL.

    Performance Note:
        - Tune POSTGRES_POOL_SIZE and POSTGRES_MAX_OVERFLOW to the expected load.
    """
    POSTGRES_USER: str = "credo"
    POSTGRES_PASSWORD: SecretStr = SecretStr("")
    POSTGRES_DB: str = "credo"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = Field(ge=1, le=65535, default=5432)
    POSTGRES_POOL_SIZE: int = Field(ge=1, default=10)
    POSTGRES_MAX_OVERFLOW: int = Field(ge=0, default=20)
    POSTGRES_POOL_TIMEOUT: float = Field(ge=1.0, default=5.0)
    DATABASE_URL: str = ""
    DB_ECHO: bool = False
    DB_CREATE_TABLES_ON_STARTUP: bool = Field(
        default=False,
        description="Create missing tables at startup instead of relying on Alembic",
    )

    @property
    def database_url(self) -> str:
        """Returns the explicit DATABASE_URL or one assembled from POSTGRES_* parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD.get_secret_value()}@{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )
