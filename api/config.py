"""API configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+asyncpg://courier:courier@db:5432/courier"
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    JWT_SECRET: str = "changeme"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24

    CORS_ORIGINS: list[str] = ["http://localhost:4200"]
    LOG_LEVEL: str = "INFO"

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    CURRENCY: str = "INR"

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
