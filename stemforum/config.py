"""
Configuration settings for the STEM Forum API
"""

from pydantic_settings import BaseSettings
from typing import List, Optional
from urllib.parse import urlparse


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Server Configuration
    APP_NAME: str = "STEM October Forum API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017/stem-forum"
    MONGODB_DB_NAME: str = ""
    MONGODB_TIMEOUT_MS: int = 5000

    # CORS Configuration
    ALLOWED_ORIGINS: str = (
        "http://localhost:3000,"
        "https://stemoctobermagazine.org,"
        "https://www.stemoctobermagazine.org"
    )
    FRONTEND_URL: str = ""

    # Rate limiting (fixed window, per client IP)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    # Behind a proxy (Vercel etc.) the client IP is the first X-Forwarded-For hop
    TRUST_PROXY: bool = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated origins to list"""
        origins = [
            origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()
        ]
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def database_name(self) -> str:
        """Explicit database name, else the path component of the URI"""
        if self.MONGODB_DB_NAME:
            return self.MONGODB_DB_NAME
        path: Optional[str] = urlparse(self.MONGODB_URI).path
        name = (path or "").lstrip("/").split("?")[0]
        return name or "stem-forum"

    model_config = {"env_file": ".env",
                    "case_sensitive": True, "extra": "allow"}


# Global settings instance
settings = Settings()
