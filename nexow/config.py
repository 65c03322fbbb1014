from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DEFAULT_SYMBOL: str = "SIM"
    START_PRICE: float = 100.0
    VOLATILITY: float = 0.01
    BAR_INTERVAL_MS: int = 1000
    LENGTH_BARS: int = 500


    RF_TREES: int = 50
    RF_MAX_DEPTH: int = 6
    MIN_TRAIN_BARS: int = 100
    TRAIN_SPLIT: float = 0.7


    STARTING_CASH: float = 10000.0
    POSITION_FRACTION: float = 0.10


    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/runtime.log"


    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


    @field_validator("TRAIN_SPLIT", "POSITION_FRACTION")
    @classmethod
    def _fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be within [0, 1]")
        return v

    @field_validator("START_PRICE")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("VOLATILITY")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        # 0 is a flat price path, same bound as EngineConfig.validate()
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _level(cls, v: str) -> str:
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(allowed)}")
        return v.upper()


settings = Settings()
