"""Service configuration loaded from the environment and ``.env``."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

SANDBOX_SNAP_URL = "https://app.sandbox.midtrans.com"
SANDBOX_API_URL = "https://api.sandbox.midtrans.com"
PRODUCTION_SNAP_URL = "https://app.midtrans.com"
PRODUCTION_API_URL = "https://api.midtrans.com"

DEFAULT_ENABLED_PAYMENTS = ["credit_card", "bca_va", "bni_va", "bri_va"]

# Midtrans transaction_status -> stored Payment.status
DEFAULT_STATUS_MAP = {
    "capture": "capture",
    "settlement": "settlement",
    "pending": "pending",
    "deny": "deny",
    "expire": "expire",
    "cancel": "cancel",
}

# Statuses a webhook must never overwrite
TERMINAL_STATUSES = ("settlement", "capture")


class Settings(BaseSettings):
    """Midtrans settings read from ``MIDTRANS_*`` variables.

    ``DATABASE_URL`` and ``LOG_LEVEL`` keep their conventional unprefixed names.
    """

    server_key: str = ""
    is_production: bool = False
    # Comma separated in the environment: MIDTRANS_ENABLED_PAYMENTS=gopay,qris
    enabled_payments: Annotated[List[str], NoDecode] = DEFAULT_ENABLED_PAYMENTS
    status_map: Dict[str, str] = DEFAULT_STATUS_MAP
    timeout: float = 30.0
    database_url: str = Field(default="sqlite:///./payments.db", validation_alias="DATABASE_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_prefix="MIDTRANS_",
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("enabled_payments", mode="before")
    @classmethod
    def split_enabled_payments(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @property
    def snap_base_url(self) -> str:
        return PRODUCTION_SNAP_URL if self.is_production else SANDBOX_SNAP_URL

    @property
    def api_base_url(self) -> str:
        return PRODUCTION_API_URL if self.is_production else SANDBOX_API_URL


def load_settings() -> Settings:
    return Settings()


@lru_cache
def get_settings() -> Settings:
    return load_settings()
