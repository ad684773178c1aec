"""Model catalog entries and per-token pricing."""

from pydantic import BaseModel, Field

from benchmaker.gateway.domain.messages import TokenUsage


class ModelPricing(BaseModel, frozen=True):
    """USD price per single token."""

    prompt: float = Field(ge=0.0)
    completion: float = Field(ge=0.0)

    def cost_for(self, usage: TokenUsage) -> float:
        return (
            usage.prompt_tokens * self.prompt
            + usage.completion_tokens * self.completion
        )


class ModelInfo(BaseModel, frozen=True):
    id: str
    name: str
    context_length: int | None = None
    pricing: ModelPricing | None = None


def pricing_index(models: list[ModelInfo]) -> dict[str, ModelPricing]:
    return {m.id: m.pricing for m in models if m.pricing is not None}
