"""Provider adapter interface."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any

from kiss_proposal.common.errors import ContractViolationError


class ProviderAdapter(ABC):
    """Knows how to talk to one provider and where its answer text lives."""

    name: str = ""
    api_key_env: str = ""
    default_base_url: str = ""
    default_model: str = ""

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    def build_request(
        self, prompt: str, api_key: str, model: str, max_tokens: int
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return (url, headers, json payload) for a single-prompt completion."""
        raise NotImplementedError

    @abstractmethod
    def extract_answer_text(self, data: dict[str, Any]) -> str:
        """
        Pull the generated text out of a successful response envelope.

        Raises:
            ContractViolationError: the envelope does not have the expected shape.
        """
        raise NotImplementedError

    def error_message(self, data: Any) -> str | None:
        """Best-effort message from a provider error body."""
        if not isinstance(data, dict):
            return None
        err = data.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            return str(msg) if msg else None
        if isinstance(err, str) and err:
            return err
        return None


def envelope_error(provider: str) -> ContractViolationError:
    return ContractViolationError(f"Unexpected response format from {provider}")
