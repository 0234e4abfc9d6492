from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    jwt_secret_key: str = "your-secret-key-change-in-production"  # Default for development
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Comma-separated, e.g. "http://localhost:3000,https://app.example.com"
    cors_origins: str = ""

    # Mail relay for schedule notifications. Empty = log only.
    mail_relay_url: str = ""
    mail_from: str = "schedules@localhost"
    mail_relay_timeout_seconds: float = 10.0

    # Applied as statement_timeout on PostgreSQL connections
    query_timeout_seconds: int = 5

    # Reject assignments where the employee lacks the shift's role
    strict_role_assignment: bool = False

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
