"""
Model Name Resolution for OpenAgent

Maps Gemini-style model names onto OpenRouter's namespaced identifiers and
picks a default output-token budget per model family.
"""

from typing import Dict, List, Tuple

DEFAULT_MODEL = "gemini-2.5-pro"

DEFAULT_MAX_TOKENS = 4096

NAMESPACE_SEPARATOR = "/"

GEMINI_TO_OPENROUTER: Dict[str, str] = {
    "gemini-2.5-pro": "google/gemini-2.5-pro",
    "gemini-2.5-flash": "google/gemini-2.5-flash",
    "gemini-2.5-pro-preview": "google/gemini-2.5-pro-preview",
    "gemini-2.5-flash-preview": "google/gemini-2.5-flash-preview",
    "gemini-2.0-flash-thinking-exp": "google/gemini-2.0-flash-thinking-exp",
    "gemini-2.0-flash-exp": "google/gemini-2.0-flash-exp",
    "gemini-pro": "google/gemini-pro",
    "gemini-pro-vision": "google/gemini-pro-vision",
    "gemini-1.5-pro": "google/gemini-pro-1.5",
    "gemini-1.5-flash": "google/gemini-flash-1.5",
}

# Ordered; the first family whose marker appears in the model name wins
MAX_TOKEN_RULES: Tuple[Tuple[str, int], ...] = (
    ("gemini-2.5", 8192),
    ("gemini-pro", 8192),
    ("claude", 4096),
    ("gpt-4", 4096),
)

# Popular OpenRouter models offered by the `model` command
POPULAR_MODELS: List[str] = [
    # Top tier models
    "x-ai/grok-code-fast-1",
    "anthropic/claude-sonnet-4",
    "qwen/qwen3-coder",
    "openrouter/sonoma-sky-alpha",

    # Google models
    "google/gemini-2.5-pro",
    "google/gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.5-flash",

    # OpenAI models
    "openai/gpt-5",
    "openai/gpt-5-mini",
    "openai/gpt-4o",

    # Anthropic models
    "anthropic/claude-3.5-sonnet",
    "anthropic/claude-3-opus",

    # Open source models
    "meta-llama/llama-3-70b-instruct",
    "mistralai/mixtral-8x7b-instruct",
]


def resolve_model_name(model: str) -> str:
    """
    Map a Gemini model name to its OpenRouter identifier.

    Names that are already namespaced (``vendor/model``) and names missing
    from the table come back unchanged.
    """
    if NAMESPACE_SEPARATOR in model:
        return model
    return GEMINI_TO_OPENROUTER.get(model, model)


def default_max_tokens(model: str) -> int:
    """Conservative output-token budget for a model family"""
    for marker, budget in MAX_TOKEN_RULES:
        if marker in model:
            return budget
    return DEFAULT_MAX_TOKENS
