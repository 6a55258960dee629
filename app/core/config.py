from typing import Dict, List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str
    SESSION_TTL_HOURS: int = 24

    SUPER_ADMIN_USERNAME: str | None = None
    SUPER_ADMIN_PASSWORD: str | None = None
    ENV: str = "dev"  # "dev" or "prod"

    # --- DISCORD WEBHOOKS ---
    # JSON map in .env, e.g. DISCORD_WEBHOOKS='{"staff": "https://discord.com/api/webhooks/..."}'
    DISCORD_WEBHOOKS: Dict[str, str] = {}
    DISCORD_DEFAULT_WEBHOOK: str | None = None
    WEBHOOK_USERNAME: str | None = "OCRP Applications"
    WEBHOOK_AVATAR_URL: str | None = None
    WEBHOOK_TIMEOUT_SECONDS: float = 10.0

    # --- RATE LIMITING (public intake + login) ---
    REDIS_URL: str | None = None
    RATE_LIMIT_ENABLED: bool = True
    INTAKE_RATE_LIMIT: str = "5/minute"
    LOGIN_RATE_LIMIT: str = "10/minute"

    COMMUNITY_NAME: str = "Orlando City Roleplay"
    FRONTEND_URL: str = "http://localhost:5173"
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
