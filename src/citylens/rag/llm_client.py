"""LiteLLM client wrapper: the opaque text-completion service.

All model calls route through this module. LiteLLM's built-in retry is used
(num_retries, exponential backoff). API key presence can be validated up
front, before any turn starts.
"""

from __future__ import annotations

import os
from typing import Protocol

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True

DEFAULT_MODEL = "gemini/gemini-2.5-flash"


class CompletionService(Protocol):
    """Anything that turns (system instruction, history, prompt) into raw text."""

    async def __call__(
        self, system: str, history: list[dict[str, str]], prompt: str
    ) -> str: ...


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "azure": "AZURE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}


def provider_of(model: str) -> str:
    return model.split("/")[0].lower() if "/" in model else "openai"


def api_key_env(model: str) -> str | None:
    """Env var holding the API key for *model*, or None if no key is needed."""
    provider = provider_of(model)
    return _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = api_key_env(model)

    if env_var is None:
        return  # No key required (e.g. ollama)

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


async def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 4096,
    temperature: float = 0.2,
    num_retries: int = 3,
) -> str:
    """Call litellm.acompletion() with retry/backoff. Returns content string.

    Raises:
        litellm.exceptions.APIError: On persistent API failure after retries.
    """
    response = await litellm.acompletion(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
        num_retries=num_retries,
    )
    return response.choices[0].message.content or ""


class LiteLLMCompletion:
    """CompletionService backed by LiteLLM."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def __call__(
        self, system: str, history: list[dict[str, str]], prompt: str
    ) -> str:
        messages = [
            {"role": "system", "content": system},
            *history,
            {"role": "user", "content": prompt},
        ]
        return await complete(
            self.model,
            messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
