"""Builds documentation prompts for exported functions."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import ExportedFunctionSnippet, GenerationOptions, GenerationRequest
from .constants import DEFAULT_LANGUAGE, DOC_INSTRUCTIONS, LANGUAGE_BY_SUFFIX, TEMPLATE_NAME


class PromptBuilder:
    """Renders the function documentation template into generation requests."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        options: GenerationOptions | None = None,
    ) -> None:
        self.templates_dir = templates_dir
        self.options = options or GenerationOptions()
        self._env = self._create_env(templates_dir)

    def build(self, snippet: ExportedFunctionSnippet) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.render(snippet),
            options=self.options,
            function_name=snippet.name,
        )

    def render(self, snippet: ExportedFunctionSnippet) -> str:
        fence, language_label = LANGUAGE_BY_SUFFIX.get(
            Path(snippet.file_path).suffix.lower(), DEFAULT_LANGUAGE
        )
        template = self._env.get_template(TEMPLATE_NAME)
        rendered = template.render(
            name=snippet.name,
            source=snippet.source_text,
            fence=fence,
            language_label=language_label,
            instructions=DOC_INSTRUCTIONS,
        )
        return rendered.strip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        default_dir = Path(__file__).with_name("templates")
        directories: List[str] = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        if str(default_dir) not in directories:
            directories.append(str(default_dir))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["PromptBuilder"]
