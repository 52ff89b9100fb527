from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # Regulatory IRR floors (annualized) per market
    TIR_MIN_AGS: float = 0.255
    TIR_MIN_EDOMEX: float = 0.299
    DEFAULT_MARKET: str = "aguascalientes"

    # Restructuring policy caps
    MAX_DEFERRAL_MONTHS: int = 6
    MAX_STEP_DOWN_PCT: float = 0.5
    STEP_DOWN_FACTOR: float = 0.5

    # Sales demo assumptions
    DEMO_ANNUAL_RATE: float = 0.255
    DEMO_MONTHS_PAID: int = 12

    SENIOR_DELTA_AMOUNT: float = 500.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
