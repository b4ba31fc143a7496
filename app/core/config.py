from typing import List

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Provider SDKs read credentials straight from the environment
load_dotenv()


class Settings(BaseSettings):
    """
    Application configuration settings.
    """
    model_config = SettingsConfigDict(
        env_prefix="CHAT_RELAY_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=("settings_",),
    )

    # Service Info
    service_name: str = "chat-relay"
    environment: str = "local"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
    quiet_loggers: List[str] = ["uvicorn.access", "httpx", "openai", "langchain_core", "langchain_openai"]

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # LLM (OpenAI via LangChain)
    openai_api_key: str = Field(
        default="placeholder-key",
        validation_alias=AliasChoices("CHAT_RELAY_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_model: str = "gpt-3.5-turbo"
    openai_temperature: float = 0.7
    model_timeout_seconds: float = 60.0

    # Sessions
    default_prompt: str = "You are a helpful assistant."
    transport_backend: str = "local"


settings = Settings()
