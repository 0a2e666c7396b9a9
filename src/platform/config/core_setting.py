from decimal import Decimal
from pathlib import Path
from typing import Optional

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

    PROJECT_NAME: str = 'Transaction Isolation Lab'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('mypassword')
    POSTGRES_DB: str = 'mydatabase'
    POSTGRES_PORT: int = 5432

    @property
    def DATABASE_URL(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    @property
    def DATABASE_URL_MASKED(self) -> str:
        return f'postgresql://{self.POSTGRES_USER}:***@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # asyncpg pool
    ASYNCPG_POOL_MIN_SIZE: int = 2
    ASYNCPG_POOL_MAX_SIZE: int = 20
    ASYNCPG_POOL_COMMAND_TIMEOUT: float = 60.0
    ASYNCPG_POOL_TIMEOUT: float = 10.0  # Connection acquire timeout (seconds)

    # Booking demo
    DEMO_SEAT_ID: str = 'A1'
    BOOKING_PROCESSING_DELAY_SECONDS: float = 0.0  # 15 for the isolation demo
    TRANSACTION_TIMEOUT_SECONDS: Optional[float] = None

    @field_validator('BOOKING_PROCESSING_DELAY_SECONDS')
    @classmethod
    def validate_processing_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError('BOOKING_PROCESSING_DELAY_SECONDS must not be negative')
        return v

    # Transfer demo
    TRANSFER_FROM_ACCOUNT: str = 'Virat'
    TRANSFER_TO_ACCOUNT: str = 'Rohit'
    TRANSFER_AMOUNT: Decimal = Decimal('100.00')

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []


settings = Settings()  # type: ignore
