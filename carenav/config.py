from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://carenav:carenav_dev@db:5432/carenav"

    # Sessions
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_MAX_AGE_DAYS: int = 30
    ALLOWED_ORIGINS: str = "*"

    # AI Provider (OpenAI-compatible)
    AI_API_KEY: str = "mock_ai_key"
    AI_BASE_URL: str = "https://api.openai.com/v1"
    AI_MODEL: str = "gpt-4o"
    AI_TIMEOUT_SECONDS: int = 60

    # Resolution strategy: "auto", "rules" or "ai"
    RESOLUTION_STRATEGY: str = "auto"

    # Storage
    STORAGE_LOCAL_PATH: str = "/app/storage"
    MAX_UPLOAD_SIZE_MB: int = 10

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True

    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
