import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.jwt_access_secret = os.getenv("JWT_SECRET", "").strip()
        self.jwt_refresh_secret = os.getenv("JWT_REFRESH_SECRET", "").strip()
        self.access_token_exp_minutes = self._get_int("ACCESS_TOKEN_EXP_MINUTES", default=30)
        self.refresh_token_exp_days = self._get_int("REFRESH_TOKEN_EXP_DAYS", default=7)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=10)
        self.otp_ttl_minutes = self._get_int("OTP_TTL_MINUTES", default=10)
        database_path = os.getenv("DATABASE_PATH", "data/devsphere.db")
        self.database_path = database_path if database_path == ":memory:" else Path(database_path).resolve()
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_password = os.getenv("SMTP_PASS")
        self.smtp_from = os.getenv("SMTP_FROM", '"DevSphere" <no-reply@devsphere.com>')
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None or value == "":
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
