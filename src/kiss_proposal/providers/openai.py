"""OpenAI adapters: Chat Completions and Responses envelopes."""
from __future__ import annotations
from typing import Any

from kiss_proposal.providers.base import ProviderAdapter, envelope_error


class _OpenAIBase(ProviderAdapter):
    api_key_env = "OPENAI_API_KEY"
    default_base_url = "https://api.openai.com"
    default_model = "gpt-4o-mini"

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }


class OpenAIChatProvider(_OpenAIBase):
    name = "openai"

    def build_request(
        self, prompt: str, api_key: str, model: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
        }
        return f"{self.base_url}/v1/chat/completions", self._headers(api_key), payload

    def extract_answer_text(self, data: dict[str, Any]) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise envelope_error(self.name) from e
        if not isinstance(content, str):
            raise envelope_error(self.name)
        return content


class OpenAIResponsesProvider(_OpenAIBase):
    """Generic ``output`` array envelope of the Responses API."""

    name = "openai-responses"

    def build_request(
        self, prompt: str, api_key: str, model: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        payload = {"model": model, "input": prompt, "max_output_tokens": max_tokens}
        return f"{self.base_url}/v1/responses", self._headers(api_key), payload

    def extract_answer_text(self, data: dict[str, Any]) -> str:
        parts: list[str] = []
        try:
            for item in data.get("output", []):
                if item.get("type") != "message":
                    continue
                for content in item.get("content", []):
                    text = content.get("text")
                    if content.get("type") == "output_text" and isinstance(text, str):
                        parts.append(text)
        except (AttributeError, TypeError) as e:
            raise envelope_error(self.name) from e
        text = "".join(parts).strip()
        if not text:
            raise envelope_error(self.name)
        return text
