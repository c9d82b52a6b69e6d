"""
KISS proposal generator.

Provides:
- Generation endpoint (FastAPI) relaying job posts to one LLM provider
- Provider adapters for the supported reply envelopes
- Client form controller with a local daily usage quota
"""
