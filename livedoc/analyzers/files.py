"""Per-file analysis: read, parse, extract."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from ..logging import get_logger
from ..models import FileAnalysis
from .functions import FunctionExtractor
from .parser import ParseError, SourceParser


def read_source(path: Path | str) -> str:
    """Read UTF-8 source text with its line endings untouched."""
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


class FileAnalyzer:
    """Produces exactly one FileAnalysis per input path; failures are recorded."""

    def __init__(
        self,
        parser: SourceParser | None = None,
        extractor: FunctionExtractor | None = None,
    ) -> None:
        self.parser = parser or SourceParser()
        self.extractor = extractor or FunctionExtractor()
        self.logger = get_logger("analyzers.files")

    def analyze(self, path: Path | str) -> FileAnalysis:
        file_path = Path(path)
        try:
            source = read_source(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.warning("Error reading file %s: %s", file_path, exc)
            return FileAnalysis.failed(str(file_path), str(exc))

        try:
            tree = self.parser.parse(source)
        except ParseError as exc:
            self.logger.warning("Parse error in %s: %s", file_path, exc)
            return FileAnalysis.failed(str(file_path), str(exc))

        functions = self.extractor.extract(tree)
        return FileAnalysis(
            path=str(file_path),
            functions=functions,
            function_count=len(functions),
            line_count=len(source.split("\n")),
            byte_size=len(tree.source),
        )

    def analyze_many(self, paths: Iterable[Path | str]) -> List[FileAnalysis]:
        analyses: List[FileAnalysis] = []
        for path in paths:
            self.logger.debug("Parsing %s", Path(path).name)
            analyses.append(self.analyze(path))
        return analyses


__all__ = ["FileAnalyzer", "read_source"]
