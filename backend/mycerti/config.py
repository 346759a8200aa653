"""Application configuration using Pydantic settings."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    auto_create_tables: bool = False

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: Optional[str] = None

    # Tokens (one secret per trust domain)
    user_jwt_secret: str
    admin_jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 7

    # Single fixed admin account
    admin_email: str = "admin@mycerti.com"
    admin_password: str
    admin_name: str = "Super Admin"

    # bcrypt cost factor
    password_hash_rounds: int = 10

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:3001"

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
