from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    telegram_bot_token: str
    allowed_chat_ids: list[int] = []

    @field_validator("allowed_chat_ids", mode="before")
    @classmethod
    def parse_chat_ids(cls, v):
        if isinstance(v, str):
            return [int(x.strip()) for x in v.split(",") if x.strip()]
        if isinstance(v, int):
            return [v]
        return v

    db_path: str = "spendly.db"
    currency: str = "NGN"
    default_monthly_budget: float = 1000.0
    default_weekly_budget: float = 250.0
    default_daily_budget: float = 35.0
    recent_expense_limit: int = 100
    debug: bool = False
    health_check_port: int = 8080


settings = Settings()
