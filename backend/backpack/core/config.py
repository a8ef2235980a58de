import os
from typing import List, Optional, Tuple

from pydantic_settings import BaseSettings

# Deployments that mount a persistent volume set DB_PATH; uploads live beside it.
_DB_PATH = os.getenv("DB_PATH")


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Backpack Referrals"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    PORT: int = 3000

    # Database
    DATABASE_URL: str = f"sqlite:///{_DB_PATH}" if _DB_PATH else "sqlite:///./backpack.db"

    # File Upload
    UPLOAD_DIR: str = "/data/uploads" if _DB_PATH else "./uploads"
    MAX_UPLOAD_SIZE_MB: int = 10
    UPLOAD_TIMEOUT_SECONDS: float = 10.0

    # Locals
    ELIGIBLE_PINCODE_RANGES: List[Tuple[int, int]] = [
        (560001, 560300),  # Primary Bangalore range
        (561000, 561999),  # Extended range 1
        (562000, 562999),  # Extended range 2
    ]
    REFERRAL_CODE_PREFIX: str = "BP-"
    REFERRAL_CODE_ATTEMPTS: int = 3

    # Verification
    VERIFICATION_ALLOW_RETRANSITION: bool = True

    # Admin
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Logging
    LOG_FILE: Optional[str] = "backpack.log"
    LOG_BUFFER_SIZE: int = 100

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
