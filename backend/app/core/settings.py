import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "Freelance Forge")
        self.api_version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.secret_key = os.getenv("SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.session_duration_days = int(os.getenv("SESSION_DURATION_DAYS", "7"))
        self.SESSION_DURATION_DAYS = self.session_duration_days
        self.session_cookie_name = "session_id"
        self.cookie_secure = _as_bool(os.getenv("COOKIE_SECURE"))
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./freelance_forge.db")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
            if origin.strip()
        ]
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Line item suggestions (OpenAI-compatible chat completions API)
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_base_url = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.llm_timeout_seconds = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))

        # Receipt uploads (S3-compatible storage such as Cloudflare R2)
        self.r2_endpoint = os.getenv("R2_ENDPOINT")
        self.r2_access_key_id = os.getenv("R2_ACCESS_KEY_ID")
        self.r2_secret_access_key = os.getenv("R2_SECRET_ACCESS_KEY")
        self.r2_region = os.getenv("R2_REGION", "auto")
        self.r2_bucket = os.getenv("R2_BUCKET")
        self.r2_public_base_url = os.getenv("R2_PUBLIC_BASE_URL")
        self.receipt_upload_expiry_seconds = int(os.getenv("RECEIPT_UPLOAD_EXPIRY_SECONDS", "600"))


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
