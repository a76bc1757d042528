import os
from dataclasses import dataclass

DEV_JWT_SECRET = 'dev-insecure-jwt-secret'


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_expires_hours: int
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str
    llm_timeout: float
    llm_temperature: float
    llm_max_tokens: int
    graph_base_url: str
    graph_timeout: float


def get_settings() -> Settings:
    """Read runtime settings from the environment.

    Values are resolved on every call so tests (and operators) can change the
    environment without re-importing the app.
    """
    return Settings(
        jwt_secret=os.getenv('JWT_SECRET', DEV_JWT_SECRET),
        jwt_expires_hours=int(os.getenv('JWT_EXPIRES_HOURS', '24')),
        openai_api_key=os.getenv('OPENAI_API_KEY'),
        openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o'),
        openai_base_url=os.getenv('OPENAI_BASE_URL', 'https://api.openai.com/v1'),
        llm_timeout=float(os.getenv('LLM_TIMEOUT', '60')),
        llm_temperature=float(os.getenv('LLM_TEMPERATURE', '0.3')),
        llm_max_tokens=int(os.getenv('LLM_MAX_TOKENS', '1000')),
        graph_base_url=os.getenv('GRAPH_BASE_URL', 'https://graph.microsoft.com/v1.0'),
        graph_timeout=float(os.getenv('GRAPH_TIMEOUT', '30')),
    )
