"""Configuration module for the chat application."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API Keys (optional for testing)
    groq_api_key: str = Field(default="")

    # Completion API
    completion_base_url: str = Field(default="https://api.groq.com/openai/v1")
    completion_model: str = Field(default="llama-3.3-70b-versatile")
    completion_temperature: float = Field(default=0.7)
    completion_max_tokens: int = Field(default=1024)
    completion_top_p: float = Field(default=1.0)
    # None keeps the HTTP client's default timeout
    completion_timeout_seconds: Optional[float] = Field(default=None)

    # Conversation texts
    system_prompt: str = Field(default="You are a helpful assistant.")
    error_reply_text: str = Field(default="Sorry, there was an error processing your request.")
    empty_reply_text: str = Field(default="Sorry, I could not process your request.")

    # Storage Configuration
    storage_backend: str = Field(default="json")
    storage_dir: str = Field(default="data")
    storage_key: str = Field(default="chat-storage")

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    # CORS Configuration
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000"
    )

    @property
    def origins_list(self) -> List[str]:
        """Convert allowed_origins string to list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
