"""Provider adapters, selected once by name at configuration time."""
from __future__ import annotations

from kiss_proposal.common.errors import ConfigurationError
from kiss_proposal.providers.anthropic import AnthropicProvider
from kiss_proposal.providers.base import ProviderAdapter
from kiss_proposal.providers.openai import OpenAIChatProvider, OpenAIResponsesProvider

PROVIDERS: dict[str, type[ProviderAdapter]] = {
    AnthropicProvider.name: AnthropicProvider,
    OpenAIChatProvider.name: OpenAIChatProvider,
    OpenAIResponsesProvider.name: OpenAIResponsesProvider,
}


def resolve_provider(name: str | None, base_url: str | None = None) -> ProviderAdapter:
    key = (name or AnthropicProvider.name).strip().lower()
    cls = PROVIDERS.get(key)
    if cls is None:
        raise ConfigurationError(
            f"Unknown LLM_PROVIDER '{name}'. Expected one of: {', '.join(sorted(PROVIDERS))}"
        )
    return cls(base_url=base_url)


__all__ = [
    "AnthropicProvider",
    "OpenAIChatProvider",
    "OpenAIResponsesProvider",
    "ProviderAdapter",
    "PROVIDERS",
    "resolve_provider",
]
