from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- DB ---
    DATABASE_URL: str = "sqlite:///./goalkeeper_stats.sqlite"

    # --- JWT ---
    JWT_SECRET: str = "change-me-goalkeeper-stats"
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_MIN: int = 10080  # 7 days

    # --- Statistics ---
    # Single threshold shared by every ranking view (top performers, dashboard leaders)
    RANKING_MIN_MATCHES: int = 5
    TOP_PERFORMERS_DEFAULT_LIMIT: int = 10
    LEADERS_LIMIT: int = 5
    COMPARE_MAX_GOALKEEPERS: int = 5

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
