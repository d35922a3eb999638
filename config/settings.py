"""Configuration settings for Complizen."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase Configuration
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    kv_table: str = "kv_store"

    # Notification Configuration
    notification_url: str = ""  # send-email function endpoint
    notification_api_key: str = ""
    notification_timeout: float = 10.0

    # Scoring Configuration
    default_regulations: list[str] = ["GDPR", "HIPAA", "SOC 2", "PCI DSS"]
    strict_severity: bool = False

    # Tracing Configuration
    tracing_enabled: bool = True
    log_level: str = "INFO"
    trace_capacity: int = 500  # recent engine events kept in memory

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
