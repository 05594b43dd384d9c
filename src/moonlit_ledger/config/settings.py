"""Configuration settings for the Moonlit ledger."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlatSettings(BaseSettings):
    """Flat settings read from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="MOONLIT_LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="MOONLIT_LOG_FORMAT"
    )

    # Row ceiling for column reads
    column_row_limit: int = Field(
        default=100,
        validation_alias="MOONLIT_COLUMN_ROW_LIMIT",
        description="Rows gathered from a list column when packing a record",
    )

    # Payroll
    shift_hours: Decimal = Field(
        default=Decimal("12"),
        gt=0,
        validation_alias="MOONLIT_SHIFT_HOURS",
        description="Length of a standard shift used for OT/UT fractions",
    )
    solo_bakery_rate: Decimal = Field(
        default=Decimal("135"), validation_alias="MOONLIT_SOLO_BAKERY_RATE"
    )
    attendance_precision: int = Field(
        default=6, validation_alias="MOONLIT_ATTENDANCE_PRECISION"
    )
    employees_file: Path | None = Field(
        default=None, validation_alias="MOONLIT_EMPLOYEES_FILE"
    )

    # Sales
    mineral_unit_price: Decimal = Field(
        default=Decimal("15"), validation_alias="MOONLIT_MINERAL_UNIT_PRICE"
    )


@lru_cache
def get_settings() -> FlatSettings:
    """Get cached settings instance."""
    return FlatSettings()
