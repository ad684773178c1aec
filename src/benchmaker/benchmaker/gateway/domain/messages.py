"""Chat request and response value objects."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel, frozen=True):
    role: Literal["system", "user", "assistant"]
    content: str


class TokenUsage(BaseModel, frozen=True):
    prompt_tokens: int = Field(ge=0)
    completion_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)


class Completion(BaseModel, frozen=True):
    """Result of a non-streaming chat completion."""

    content: str
    usage: TokenUsage | None = None


class StreamChunk(BaseModel, frozen=True):
    """One increment of a streamed completion.

    ``content`` is the text delta; usage usually arrives only on the last chunk.
    """

    content: str = ""
    usage: TokenUsage | None = None
