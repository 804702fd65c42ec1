"""Shared constants for function documentation prompts."""

from __future__ import annotations

TEMPLATE_NAME = "function_doc.j2"

DOC_INSTRUCTIONS: tuple[str, ...] = (
    "**Description:** Write a brief, one-paragraph description of what the function does.",
    "**Parameters:** List each parameter in a table with columns for \"Parameter\", \"Type\", "
    "and \"Description\". Infer the type if not explicit.",
    "**Returns:** Describe what the function returns.",
    "**Example Usage:** Provide a clear, simple code block showing how to use the function.",
)

# suffix -> (code fence language, human-readable language)
LANGUAGE_BY_SUFFIX: dict[str, tuple[str, str]] = {
    ".js": ("javascript", "JavaScript"),
    ".mjs": ("javascript", "JavaScript"),
    ".cjs": ("javascript", "JavaScript"),
    ".jsx": ("jsx", "JavaScript"),
    ".ts": ("typescript", "TypeScript"),
    ".mts": ("typescript", "TypeScript"),
    ".tsx": ("tsx", "TypeScript"),
}

DEFAULT_LANGUAGE: tuple[str, str] = ("javascript", "JavaScript")


__all__ = ["DEFAULT_LANGUAGE", "DOC_INSTRUCTIONS", "LANGUAGE_BY_SUFFIX", "TEMPLATE_NAME"]
