"""Hosted model runner adapters."""

from .runner import ImageRequest, LLMRequest, LLMRunner

__all__ = ["ImageRequest", "LLMRequest", "LLMRunner"]
