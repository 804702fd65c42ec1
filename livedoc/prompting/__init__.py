"""Prompt construction for generated function documentation."""

from .builder import PromptBuilder

__all__ = ["PromptBuilder"]
