from __future__ import annotations

import os

APP_VERSION = "0.4.0"


class Settings:
    PROJECT_NAME: str = "ISO Process Mapper"
    API_V1_PREFIX: str = "/api/v1"

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ALLOWED_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:8080").split(",")
        if o.strip()
    ]

    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "processmapper")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "processmapper")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "processmapper")

    # Generative augmentation (optional; if no key is set, the deterministic
    # benchmark pipeline is used on every request)
    GENERATOR_ENABLED: bool = os.getenv("GENERATOR_ENABLED", "true").lower() in ("1", "true", "yes")
    GENERATOR_API_URL: str = os.getenv(
        "GENERATOR_API_URL", "https://api.openai.com/v1/chat/completions"
    )
    GENERATOR_API_KEY: str = os.getenv("GENERATOR_API_KEY", "")
    GENERATOR_MODEL: str = os.getenv("GENERATOR_MODEL", "gpt-4o-mini")
    GENERATOR_TIMEOUT_SECONDS: float = float(os.getenv("GENERATOR_TIMEOUT_SECONDS", "20"))

    MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "500"))
    GENERATE_RATE_LIMIT: str = os.getenv("GENERATE_RATE_LIMIT", "10/minute")

    # Email / SMTP (optional; if not configured, report emails are skipped)
    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_FROM: str = os.getenv("SMTP_FROM", "noreply@processmapper.local")
    SMTP_TLS: bool = os.getenv("SMTP_TLS", "true").lower() in ("1", "true", "yes")

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def generator_configured(self) -> bool:
        return self.GENERATOR_ENABLED and bool(self.GENERATOR_API_KEY)


settings = Settings()
