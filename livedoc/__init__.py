"""Function inventory and living documentation for JavaScript/TypeScript projects."""

__version__ = "0.1.0"
