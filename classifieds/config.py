"""
Service settings, read from the environment via pydantic-settings.

Variables use the ``CLASSIFIEDS_`` prefix (``CLASSIFIEDS_DATA_DIR``,
``CLASSIFIEDS_LOG_LEVEL`` ...) and may also come from a ``.env`` file.
``get_settings()`` is cached, so the process sees one instance.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data" / "catalog"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLASSIFIEDS_", env_file=".env", case_sensitive=False
    )

    # Storage
    storage_backend: Literal["json", "memory"] = "json"
    data_dir: Path = DEFAULT_DATA_DIR

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    # Host-supplied call facts
    caller_header: str = "X-Caller-Id"
    deposit_header: str = "X-Attached-Deposit"


@lru_cache
def get_settings() -> Settings:
    return Settings()
