"""Turn the provider's answer text into a GenerateOut.

Pure functions: no network, no logging side effects beyond raising
ContractViolationError when the reply does not match the requested format.
"""
from __future__ import annotations
import json
import re

from pydantic import ValidationError

from kiss_proposal.common.errors import ContractViolationError
from kiss_proposal.common.schema import GenerateOut

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")

CONTRACT_MESSAGE = "The model reply was not in the expected format. Please try again."


def strip_code_fences(text: str) -> str:
    """Remove one surrounding ```lang ... ``` fence, if present."""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_generation(text: str) -> GenerateOut:
    """
    Parse the provider answer into a GenerateOut.

    Args:
        text: Raw answer text extracted from the provider envelope.

    Raises:
        ContractViolationError: not JSON, not an object, or wrong field types.
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ContractViolationError(CONTRACT_MESSAGE) from e

    if not isinstance(data, dict):
        raise ContractViolationError(CONTRACT_MESSAGE)
    if data.get("special_instructions_found") is None:
        data["special_instructions_found"] = []

    try:
        return GenerateOut.model_validate(data, strict=True)
    except ValidationError as e:
        raise ContractViolationError(CONTRACT_MESSAGE) from e
