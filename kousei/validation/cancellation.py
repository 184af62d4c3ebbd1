"""Cancellation token shared by the validator and the LLM clients."""

from kousei.llm.cancellation import CancellationToken

__all__ = ["CancellationToken"]
