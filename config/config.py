import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://api.brightdata.com/datasets/v3"
DEFAULT_DATASET_ID = "gd_m5zlb2loauntf6oof"  # Google/Bing search results dataset
PLACEHOLDER_API_KEYS = frozenset({"", "YOUR_API_KEY_HERE", "Bright_Data_API_KEY"})


@dataclass(frozen=True)
class BrightDataSettings:
    """Everything the API client needs; read-only once built."""

    api_key: str
    dataset_id: str = DEFAULT_DATASET_ID
    base_url: str = DEFAULT_API_BASE_URL
    http_timeout_s: float = 30.0

    @property
    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        self._errors: list[str] = []

        # API Configuration
        self.BRIGHTDATA_API_KEY = (os.getenv("BRIGHTDATA_API_KEY") or "").strip()
        self.BRIGHTDATA_DATASET_ID = os.getenv("BRIGHTDATA_DATASET_ID", DEFAULT_DATASET_ID)
        self.BRIGHTDATA_API_BASE_URL = os.getenv(
            "BRIGHTDATA_API_BASE_URL", DEFAULT_API_BASE_URL
        ).rstrip("/")
        self.HTTP_TIMEOUT_SECONDS = self._float_env("HTTP_TIMEOUT_SECONDS", 30.0)

        # Polling Configuration
        self.POLL_INTERVAL_SECONDS = self._float_env("POLL_INTERVAL_SECONDS", 10.0)
        self.MAX_WAIT_SECONDS = self._float_env("MAX_WAIT_SECONDS", 300.0)

        # Output Configuration
        self.OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "."))

    def _float_env(self, name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError:
            self._errors.append(f"{name} must be a number, got {raw!r}")
            return default

    def validate(self) -> str | None:
        """
        Check that the API key is usable and numeric settings parsed.

        Returns:
            An error message, or None if the configuration is valid
        """
        if self._errors:
            return self._errors[0]
        if self.BRIGHTDATA_API_KEY in PLACEHOLDER_API_KEYS:
            return (
                "BRIGHTDATA_API_KEY is not set. Put your Bright Data API key in the .env file "
                "(Account Settings in the Bright Data dashboard)."
            )
        if self.POLL_INTERVAL_SECONDS <= 0:
            return "POLL_INTERVAL_SECONDS must be positive"
        if self.MAX_WAIT_SECONDS <= 0:
            return "MAX_WAIT_SECONDS must be positive"
        return None

    def get_settings(self) -> BrightDataSettings:
        return BrightDataSettings(
            api_key=self.BRIGHTDATA_API_KEY,
            dataset_id=self.BRIGHTDATA_DATASET_ID,
            base_url=self.BRIGHTDATA_API_BASE_URL,
            http_timeout_s=self.HTTP_TIMEOUT_SECONDS,
        )
