from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Showtime Reservation'
    VERSION: str = '0.1.0'
    DEBUG: bool = False
    SERVICE_NAME: str = 'showtime-reservation'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'showtime_reservation'
    # Full URL override, e.g. sqlite+aiosqlite:///./local.db
    DATABASE_URL: str | None = None

    # Connection pool (ignored for SQLite, which uses NullPool)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    DB_SQLITE_BUSY_TIMEOUT: float = 15.0
    DB_CREATE_TABLES_ON_STARTUP: bool = False

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@{self.POSTGRES_SERVER}:'
            f'{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Seat holds and bookings
    BOOKING_LEASE_MINUTES: int = 15
    MAX_SEATS_PER_HOLD: int = 10
    REFERENCE_CODE_MAX_ATTEMPTS: int = 5

    # Reconciliation scheduler
    RECONCILIATION_ENABLED: bool = True
    RECONCILIATION_SHOWTIME_INTERVAL_SECONDS: float = 60.0
    RECONCILIATION_BOOKING_INTERVAL_SECONDS: float = 60.0
    RECONCILIATION_LOCK_INTERVAL_SECONDS: float = 60.0
    RECONCILIATION_CONSISTENCY_INTERVAL_SECONDS: float = 60.0
    RECONCILIATION_MAX_RETRIES: int = 3
    RECONCILIATION_RETRY_BACKOFF_SECONDS: float = 1.0


settings = Settings()  # type: ignore
