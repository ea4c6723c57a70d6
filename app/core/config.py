from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    env: Literal["prod", "dev"] = "prod"
    # Only used in prod; dev allows every origin
    allowed_origins: list[str] = ["http://localhost:5173"]
    # Per client IP, shared by all /api routes
    rate_limit: str = "100 per 15 minutes"

    # OpenRouter (OpenAI-compatible)
    openrouter_api_key: str
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    generator_model: str
    judge_model: str

    # LLM call settings
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 3
    llm_retry_delay_seconds: float = 1.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4000

    # PokeAPI
    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    pokeapi_timeout_seconds: float = 10.0

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"

    @property
    def cors_origins(self) -> list[str]:
        return ["*"] if self.is_dev else self.allowed_origins


load_dotenv()
settings = Config()  # pyright: ignore[reportCallIssue]
