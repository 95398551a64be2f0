import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/app.db")).resolve()
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4")
        self.openai_temperature = self._get_float("OPENAI_TEMPERATURE", default=0.7)
        self.openai_max_tokens = self._get_int("OPENAI_MAX_TOKENS", default=2000)
        self.openai_base_url = os.getenv("OPENAI_BASE_URL") or None
        self.payment_processing_delay = self._get_float("PAYMENT_PROCESSING_DELAY", default=2.0)
        self.payment_success_rate = self._get_float("PAYMENT_SUCCESS_RATE", default=0.9)
        self.api_key_latency_scale = self._get_float("API_KEY_LATENCY_SCALE", default=1.0)
        self.api_key_failure_rate = self._get_float("API_KEY_FAILURE_RATE", default=0.05)
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_float(key: str, default: Optional[float] = None) -> float:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return float(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be a number") from exc
