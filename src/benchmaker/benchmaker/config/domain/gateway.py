"""Inference gateway connection settings."""

from pydantic import BaseModel, Field

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class GatewayConfig(BaseModel, frozen=True):
    """Where and how model requests are sent.

    ``provider`` is the LiteLLM routing prefix; model ids in the config are
    the catalog ids without it (e.g. ``openai/gpt-4o-mini``).
    """

    api_key: str = Field(min_length=1)
    base_url: str = OPENROUTER_BASE_URL
    provider: str = Field(default="openrouter", min_length=1)
    app_title: str = "benchmaker"
    app_url: str | None = None
    timeout_seconds: float = Field(default=120.0, gt=0.0)
