"""Error taxonomy shared by the endpoint and the provider adapters.

Every error carries the HTTP status the endpoint answers with and a short,
human-readable message that is safe to show to the end user.
"""
from __future__ import annotations


class ProposalError(Exception):
    """Base class for failures surfaced as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputError(ProposalError):
    """Missing or blank description."""

    status_code = 400


class MethodNotAllowedError(ProposalError):
    status_code = 405


class ConfigurationError(ProposalError):
    """Server-side misconfiguration (missing credential, unknown provider)."""

    status_code = 500


class UpstreamError(ProposalError):
    """The provider answered with a non-success status or could not be reached."""

    status_code = 500


class ContractViolationError(ProposalError):
    """The provider succeeded but its reply is not the expected JSON object."""

    status_code = 500
