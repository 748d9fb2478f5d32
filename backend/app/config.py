"""Application configuration from environment variables."""

from datetime import date
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.services.wage_rules import NIGHT_DIFF_RATE

_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"
    environment: str = "development"
    data_dir: str = "data"

    # Payroll defaults applied by the API when a request does not override them
    night_diff_rate: float = NIGHT_DIFF_RATE
    default_rest_day: int = 0          # 0=Sunday .. 6=Saturday
    apply_holiday_logic: bool = True
    holiday_logic_cutoff_date: Optional[date] = None
    holiday_calendar_file: Optional[str] = None   # JSON list, relative to data_dir


settings = Settings()
