"""Environment-driven settings."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATA_DIR = Path(__file__).parent / "data"
DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str]
    gemini_model: str
    data_dir: Path
    # Name of the Streamlit auth provider section; None runs in demo mode.
    auth_provider: Optional[str]
    log_level: str

    @property
    def ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_provider)


def _env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def load_settings() -> Settings:
    data_dir = _env("BREADCALC_DATA_DIR")
    return Settings(
        gemini_api_key=_env("GEMINI_API_KEY") or _env("API_KEY"),
        gemini_model=_env("GEMINI_MODEL") or DEFAULT_MODEL,
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        auth_provider=_env("BREADCALC_AUTH_PROVIDER"),
        log_level=(_env("BREADCALC_LOG_LEVEL") or "INFO").upper(),
    )
