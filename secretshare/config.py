from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Database
    database_url: str = "sqlite:///./secrets.db"

    # Share links
    share_base_url: str = "http://localhost:3000"
    short_id_max_attempts: int = 5

    # Limits
    default_expiry_days: int = 7
    max_expiry_days: int = 365
    max_secret_length: int = 100_000
    grant_expiry_days: int = 30  # how long a grant outlives its secret
    max_grant_extension_days: int = 3650

    # Policy
    single_use_secrets: bool = False  # purge after the first successful read

    # Rate Limiting
    rate_limit_creates: str = "10/minute"
    rate_limit_retrieves: str = "30/minute"
    rate_limit_admin: str = "30/minute"

    # Admin
    admin_api_key: str | None = None

    # Background cleanup
    cleanup_enabled: bool = False
    cleanup_interval_hours: int = 1

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" | "json"

    # CORS
    cors_origins: list[str] | str = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
