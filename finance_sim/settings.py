"""Runtime configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CLI configuration loaded from ``FINANCE_SIM_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_SIM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "WARNING"
    log_json: bool = False

    # Longest schedule printed to the terminal before truncating
    max_rows: int = 120


def get_settings() -> Settings:
    return Settings()
