"""Tests for the prompt builder."""

from __future__ import annotations

from pathlib import Path

from livedoc.models import ExportedFunctionSnippet, GenerationOptions
from livedoc.prompting import PromptBuilder

_SNIPPET = ExportedFunctionSnippet(
    name="foo",
    source_text="function foo(a) {\n  return a * 2;\n}",
    file_path="src/utils.js",
)


def test_prompt_contains_name_source_and_instructions() -> None:
    prompt = PromptBuilder().render(_SNIPPET)

    assert "for the given JavaScript function." in prompt
    assert "**Function Name:** `foo`" in prompt
    assert "```javascript\nfunction foo(a) {\n  return a * 2;\n}\n```" in prompt
    assert "1.  **Description:**" in prompt
    assert "2.  **Parameters:**" in prompt
    assert "3.  **Returns:**" in prompt
    assert "4.  **Example Usage:**" in prompt
    assert prompt.rstrip().endswith(
        'Do not include any headers like "Here is the documentation".'
    )


def test_prompt_language_follows_file_suffix() -> None:
    snippet = ExportedFunctionSnippet(name="bar", source_text="function bar() {}", file_path="src/x.ts")

    prompt = PromptBuilder().render(snippet)

    assert "TypeScript function" in prompt
    assert "```typescript\n" in prompt


def test_build_attaches_options_and_name() -> None:
    options = GenerationOptions(temperature=0.5, max_output_tokens=256)

    request = PromptBuilder(options=options).build(_SNIPPET)

    assert request.function_name == "foo"
    assert request.options == options
    assert request.prompt.startswith("You are an expert technical writer.")


def test_build_uses_default_options() -> None:
    request = PromptBuilder().build(_SNIPPET)

    assert request.options.temperature == 0.2
    assert request.options.max_output_tokens == 1024


def test_templates_dir_overrides_packaged_template(tmp_path: Path) -> None:
    (tmp_path / "function_doc.j2").write_text("Document {{ name }} please.\n", encoding="utf-8")

    prompt = PromptBuilder(tmp_path).render(_SNIPPET)

    assert prompt == "Document foo please.\n"
