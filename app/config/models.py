"""Model catalog - OpenRouter model identifiers the service knows about."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelConfig:
    """A completion model offered through OpenRouter."""

    model_id: str
    display_name: str
    free: bool  # Free models need no credits on the OpenRouter account


AI_MODELS: dict[str, ModelConfig] = {
    "mistral-7b": ModelConfig(
        model_id="mistralai/mistral-7b-instruct",
        display_name="Mistral 7B Instruct",
        free=True,
    ),
    "qwen-72b": ModelConfig(
        model_id="qwen/qwen-2.5-72b-instruct",
        display_name="Qwen 2.5 72B Instruct",
        free=True,
    ),
    "llama-8b": ModelConfig(
        model_id="meta-llama/llama-3.1-8b-instruct",
        display_name="Llama 3.1 8B Instruct",
        free=True,
    ),
    "llama-3b": ModelConfig(
        model_id="meta-llama/llama-3.2-3b-instruct",
        display_name="Llama 3.2 3B Instruct",
        free=True,
    ),
    "claude-sonnet": ModelConfig(
        model_id="anthropic/claude-3.5-sonnet",
        display_name="Claude 3.5 Sonnet",
        free=False,
    ),
    "gpt-4o": ModelConfig(
        model_id="openai/gpt-4o",
        display_name="GPT-4o",
        free=False,
    ),
}

DEFAULT_MODEL = AI_MODELS["mistral-7b"].model_id


def get_model(name: str) -> ModelConfig | None:
    """Look up a model by catalog key or full OpenRouter model id.

    Returns None for ids outside the catalog. Those are still valid to send
    upstream; OpenRouter is the authority on which ids exist.
    """
    if name in AI_MODELS:
        return AI_MODELS[name]
    for model in AI_MODELS.values():
        if model.model_id == name:
            return model
    return None
