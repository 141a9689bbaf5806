# app/core/config.py

from pathlib import Path
from typing import Optional
from pydantic import EmailStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

AUTH_PROVIDERS = ("clerk", "supabase", "mock")

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Ledgerly API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Database Configuration
    DATABASE_URL: str

    # Authentication provider: clerk, supabase or mock
    AUTH_PROVIDER: str = "clerk"

    # Clerk Configuration
    CLERK_JWKS_URL: str = ""
    CLERK_ISSUER: Optional[str] = None

    # Supabase Configuration
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Mock identity (local development and tests only)
    MOCK_USER_ID: str = "mock_user"
    MOCK_USER_EMAIL: EmailStr = "mock.user@example.com"

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:5173"

    # Bookkeeping defaults
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_CATEGORY_ICON: str = "🏷️"
    SEED_GLOBAL_CATEGORIES: bool = True

    @field_validator("AUTH_PROVIDER")
    @classmethod
    def validate_auth_provider(cls, value: str) -> str:
        """Reject unknown auth providers"""
        normalized = value.strip().lower()
        if normalized not in AUTH_PROVIDERS:
            raise ValueError(f"AUTH_PROVIDER must be one of {', '.join(AUTH_PROVIDERS)}")
        return normalized

    @property
    def is_supabase(self) -> bool:
        """Check if we're using Supabase database"""
        # Cover both to ensure DB engine gets the right settings
        return any(d in self.DATABASE_URL for d in [
            "supabase.co",
            "supabase.com",
            "pooler.supabase",
        ])

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_sqlite_memory(self) -> bool:
        return self.is_sqlite and (self.DATABASE_URL.endswith("://") or ":memory:" in self.DATABASE_URL)

# Create a global settings instance
settings = Settings()
