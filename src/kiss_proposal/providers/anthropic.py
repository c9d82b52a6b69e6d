"""Anthropic Messages API adapter."""
from __future__ import annotations
from typing import Any

from kiss_proposal.providers.base import ProviderAdapter, envelope_error

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(ProviderAdapter):
    name = "anthropic"
    api_key_env = "ANTHROPIC_API_KEY"
    default_base_url = "https://api.anthropic.com"
    default_model = "claude-sonnet-4-20250514"

    def build_request(
        self, prompt: str, api_key: str, model: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        url = f"{self.base_url}/v1/messages"
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        return url, headers, payload

    def extract_answer_text(self, data: dict[str, Any]) -> str:
        try:
            for block in data["content"]:
                if block.get("type", "text") == "text":
                    return str(block["text"])
        except (KeyError, TypeError, AttributeError) as e:
            raise envelope_error(self.name) from e
        raise envelope_error(self.name)
