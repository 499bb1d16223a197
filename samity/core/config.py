from pydantic_settings import BaseSettings
from decimal import Decimal
from pathlib import Path

# Find .env file - check samity/ directory first, then project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent
PACKAGE_ENV = BASE_DIR / "samity" / ".env"
ROOT_ENV = BASE_DIR / ".env"

# Use samity/.env if it exists, otherwise try root .env
env_file = str(PACKAGE_ENV) if PACKAGE_ENV.exists() else (str(ROOT_ENV) if ROOT_ENV.exists() else ".env")


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./samity.db"

    # Ledger defaults (restored on reset)
    DEFAULT_INTEREST_RATE: Decimal = Decimal("5.0")
    DEFAULT_MONTHLY_SAVINGS_AMOUNT: Decimal = Decimal("100")
    MONTHLY_COLLECTION_NOTE: str = "Monthly Savings Entry"

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = env_file
        case_sensitive = True


settings = Settings()
