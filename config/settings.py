import os
from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from the backend .env explicitly (works regardless of cwd)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

class Settings(BaseSettings):
    """Application settings"""

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Database (fallback to local SQLite if not provided)
    DATABASE_URL: str = os.getenv("DATABASE_URL") or "sqlite:///./pixelpi.db"

    # Pinata IPFS pinning
    PINATA_API_KEY: str = os.getenv("PINATA_API_KEY", "")
    PINATA_SECRET_API_KEY: str = os.getenv("PINATA_SECRET_API_KEY", "")
    PINATA_API_URL: str = os.getenv("PINATA_API_URL", "https://api.pinata.cloud")
    PINATA_GATEWAY_URL: str = os.getenv("PINATA_GATEWAY_URL", "https://gateway.pinata.cloud/ipfs")

    @property
    def PINATA_CONFIGURED(self) -> bool:
        return bool(self.PINATA_API_KEY and self.PINATA_SECRET_API_KEY)

    # Uploads
    MAX_IMAGE_SIZE: int = 10 * 1024 * 1024  # 10 MB

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance"""
    return Settings()
