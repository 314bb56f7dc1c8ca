# src/rentcalc/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Reference data sources
    # -----------------------------
    # Federal Office for Housing: history of the mortgage reference rate
    MORTGAGE_RATE_URL: str = Field(
        default=(
            "https://www.bwo.admin.ch/bwo/de/home/mietrecht/referenzzinssatz/"
            "entwicklung-referenzzinssatz-und-durchschnittszinssatz.html"
        )
    )
    # Federal Statistical Office: consumer price index workbook
    INFLATION_INDEX_URL: str = Field(
        default="https://www.bfs.admin.ch/bfsstatic/dam/assets/13047088/master"
    )
    # Sheet holding the index on the December 2015 = 100 basis
    INFLATION_SHEET: str = Field(default="2015")

    # -----------------------------
    # HTTP
    # -----------------------------
    HTTP_TIMEOUT_S: float = Field(default=20.0)
    HTTP_MAX_RETRIES: int = Field(default=0)
    HTTP_BACKOFF_BASE_S: float = Field(default=0.8)
    USER_AGENT: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 rentcalc"
    )

    # Download BWO page and BFS workbook in parallel
    FETCH_CONCURRENTLY: bool = Field(default=False)

    # -----------------------------
    # Calculation defaults
    # -----------------------------
    DEFAULT_MAINTENANCE_RATE: float = Field(default=10.0)

    model_config = SettingsConfigDict(
        env_prefix="RENTCALC_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("DEFAULT_MAINTENANCE_RATE", mode="before")
    @classmethod
    def _to_percent_points(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if not 0 <= f <= 100:
            raise ValueError("rate must be between 0 and 100 (percent points)")
        return f

    @field_validator("HTTP_MAX_RETRIES", mode="before")
    @classmethod
    def _retries_non_negative(cls, v: Any) -> Any:
        n = int(float(v))
        if n < 0:
            raise ValueError("HTTP_MAX_RETRIES must be >= 0")
        return n

    @field_validator("HTTP_TIMEOUT_S", mode="before")
    @classmethod
    def _timeout_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("HTTP_TIMEOUT_S must be > 0")
        return f


config = AppConfig()
