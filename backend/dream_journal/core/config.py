from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # API settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # OpenAI API
    OPENAI_API_KEY: Optional[str] = None

    # Dream analysis (chat completions)
    COMPLETION_MODEL: str = "gpt-3.5-turbo"
    COMPLETION_MAX_TOKENS: int = 500
    COMPLETION_TEMPERATURE: float = 0.7
    CONNECTION_TEST_MODEL: str = "gpt-4"

    # Dream visualization (image generation)
    IMAGE_MODEL: str = "dall-e-3"
    IMAGE_SIZE: str = "1024x1024"
    IMAGE_QUALITY: str = "standard"

    # CORS settings
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
