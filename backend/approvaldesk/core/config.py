from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "approval-desk"
    env: str = "development"

    # Overrides the postgres_* parts when set (tests point this at SQLite).
    database_url: str = ""
    postgres_host: str = "postgres"
    postgres_db: str = "approvaldesk"
    postgres_user: str = "approvaldesk"
    postgres_password: str = "approvaldesk"
    postgres_port: int = 5432

    log_level: str = "INFO"
    log_format: str = "plain"  # plain | json

    cors_allowed_origins: list[str] = ["http://localhost:3000"]

    notifications_enabled: bool = True
    notification_queue_size: int = 100
    notification_backend: str = "log"  # log | smtp | celery

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    mail_from_address: str = "no-reply@approvaldesk.local"
    mail_from_name: str = "Approval Desk"

    redis_url: str = "redis://redis:6379/0"

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_allowed_origins(cls, value):
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("notification_backend", "log_format")
    @classmethod
    def lowercase_choice(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def validate_production_mail(self):
        if (
            self.env.strip().lower() in {"production", "prod"}
            and self.notification_backend == "smtp"
            and not self.smtp_host
        ):
            raise ValueError("SMTP_HOST must be set when sending notifications over SMTP in production")
        return self

    @property
    def database_dsn(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
