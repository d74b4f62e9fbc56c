from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Storefront Checkout"
    METRICS_ENABLED: bool = True
    QUOTE_LOG_ENABLED: bool = True
    MEMBERSHIP_CONFIG_PATH: str = ""
    SPLIT_BALANCE_TOLERANCE: Decimal = Decimal("0.01")

settings = Settings()
