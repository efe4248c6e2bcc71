from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class GuardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOLT21_", env_file=".env", extra="ignore")

    # step-up thresholds, in sats
    short_threshold_sats: int = 100_000
    daily_threshold_sats: int = 500_000
    window_seconds: int = 5 * 60

    # longest string accepted from QR / clipboard / manual entry
    max_input_length: int = 4096

    # where the risk history survives restarts, None keeps it in memory
    state_path: Optional[str] = None

    enable_hardening: bool = True


settings = GuardSettings()
