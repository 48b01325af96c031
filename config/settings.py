"""Settings configuration using pydantic-settings for environment variable management."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from dotenv import load_dotenv

load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "ai_website_builder"

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    ALLOWED_ORIGINS: str = "http://localhost:3000"

    GENERATION_PROVIDER: Literal["huggingface", "gemini"] = "huggingface"
    HUGGING_FACE_API_TOKEN: str = ""
    HUGGING_FACE_API_URL: str = "https://api-inference.huggingface.co/models"
    HUGGING_FACE_MODEL: str = "gpt2"
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL_NAME: str = "gemini-2.0-flash"
    GENERATION_MAX_NEW_TOKENS: int = 500
    GENERATION_TEMPERATURE: float = 0.7
    GENERATION_TIMEOUT_SECONDS: float = 30.0

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    APP_NAME: str = "AI Website Builder"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("ALLOWED_ORIGINS", "JWT_SECRET", mode="before")
    @classmethod
    def strip_value(cls, v):
        """Strip surrounding whitespace from string values."""
        if isinstance(v, str):
            return v.strip()
        return v

    def get_allowed_origins(self) -> list[str]:
        """
        Parse comma-separated CORS origins into a list.

        Returns:
            List of origins (e.g., ['http://localhost:3000', 'https://app.example.com'])
        """
        if not self.ALLOWED_ORIGINS:
            return []
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()
