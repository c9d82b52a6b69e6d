"""Client form controller: input validation, quota, one request, result state."""
from __future__ import annotations
import logging
import os
import shutil
import subprocess
import sys
import time
from typing import Callable

import httpx

from kiss_proposal.client.usage import UsageStore
from kiss_proposal.common.schema import GenerateOut

LOGGER = logging.getLogger("kiss_proposal.client.form")

DEFAULT_ENDPOINT_URL = os.getenv("KISS_ENDPOINT_URL", "http://localhost:8000/generate")
COPIED_RESET_SECONDS = 2.0

EMPTY_INPUT_MESSAGE = "Please paste a job description first"
NETWORK_ERROR_MESSAGE = "Couldn't reach the proposal service. Check your connection and try again."
GENERIC_ERROR_MESSAGE = "Failed to generate proposal. Please try again."
QUOTA_MESSAGE = (
    "You've used all {limit} free proposals for today. "
    "Come back tomorrow or upgrade for unlimited proposals."
)


def system_clipboard(text: str) -> None:
    """Copy text with the platform clipboard tool (pbcopy, clip or xclip)."""
    if sys.platform == "darwin":
        cmd = ["pbcopy"]
    elif sys.platform.startswith("win"):
        cmd = ["clip"]
    elif shutil.which("wl-copy"):
        cmd = ["wl-copy"]
    else:
        cmd = ["xclip", "-selection", "clipboard"]
    subprocess.run(cmd, input=text, text=True, check=True)


class ProposalFormController:
    def __init__(
        self,
        usage: UsageStore,
        endpoint_url: str = DEFAULT_ENDPOINT_URL,
        http_client: httpx.Client | None = None,
        clipboard: Callable[[str], None] = system_clipboard,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.usage = usage
        self.endpoint_url = endpoint_url
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=None)
        self._clipboard = clipboard
        self._clock = clock

        self.description = ""
        self.proposal = ""
        self.special_instructions: list[str] = []
        self.loading = False
        self.error: str | None = None
        self._copied_at: float | None = None

        self.usage.load()

    @property
    def quota_exhausted(self) -> bool:
        return self.usage.exhausted

    @property
    def can_submit(self) -> bool:
        return not self.loading and bool(self.description.strip()) and not self.quota_exhausted

    @property
    def copied(self) -> bool:
        if self._copied_at is None:
            return False
        return self._clock() - self._copied_at < COPIED_RESET_SECONDS

    def submit(self) -> bool:
        """
        Generate a proposal for the current description.

        Returns:
            True when a proposal was received and stored.
        """
        if self.loading:
            return False
        if not self.description.strip():
            self.error = EMPTY_INPUT_MESSAGE
            return False
        self.usage.reset_if_new_day()
        if self.quota_exhausted:
            self.error = QUOTA_MESSAGE.format(limit=self.usage.daily_limit)
            return False

        self.proposal = ""
        self.special_instructions = []
        self.error = None
        self._copied_at = None
        self.loading = True
        try:
            r = self.http_client.post(self.endpoint_url, json={"description": self.description})
            if not r.is_success:
                LOGGER.error("Generation failed with status %s: %s", r.status_code, r.text[:200])
                self.error = GENERIC_ERROR_MESSAGE
                return False
            payload = r.json()
            if isinstance(payload, dict) and payload.get("special_instructions_found") is None:
                payload["special_instructions_found"] = []
            result = GenerateOut.model_validate(payload)
        except httpx.TransportError as e:
            LOGGER.error("Endpoint unreachable: %s", e)
            self.error = NETWORK_ERROR_MESSAGE
            return False
        except httpx.HTTPError as e:
            LOGGER.error("Generation request failed: %s", e)
            self.error = GENERIC_ERROR_MESSAGE
            return False
        except ValueError as e:
            # Covers undecodable JSON and pydantic ValidationError.
            LOGGER.error("Unexpected response from endpoint: %s", e)
            self.error = GENERIC_ERROR_MESSAGE
            return False
        finally:
            self.loading = False

        self.proposal = result.proposal
        self.special_instructions = list(result.special_instructions_found)
        self.usage.increment()
        return True

    def close(self) -> None:
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> "ProposalFormController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def copy_to_clipboard(self) -> None:
        if not self.proposal:
            return
        self._clipboard(self.proposal)
        self._copied_at = self._clock()
