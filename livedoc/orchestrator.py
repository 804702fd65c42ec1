"""Pipeline orchestration for the analyze and sync flows."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .analyzers import (
    AnalysisAggregator,
    FileAnalyzer,
    FunctionExtractor,
    ParseError,
    SourceParser,
    read_source,
)
from .config import GenerationConfig, LiveDocConfig, load_config, require_api_key
from .git.changes import ChangeSelection, ChangeSelector, RevisionHistory, SelectionState
from .git.history import GitHistory
from .llm.client import GenerationClient
from .logging import get_logger
from .models import AnalysisSummary, FileAnalysis, GenerationOptions, GenerationRequest
from .postproc.markers import DocumentPatcher, MarkerManager, PatchStatus
from .prompting.builder import PromptBuilder
from .repo_scanner import FileDiscovery


@dataclass
class AnalysisOutcome:
    """Result of an analysis run."""

    root: Path
    analyses: List[FileAnalysis]
    summary: AnalysisSummary
    breakdown: Dict[str, int]
    report: str

    @property
    def file_count(self) -> int:
        return self.summary.successfully_parsed

    @property
    def function_count(self) -> int:
        return self.summary.total_functions


@dataclass
class FunctionSyncResult:
    """What happened to one exported function during a sync run."""

    name: str
    file_path: str
    status: PatchStatus


@dataclass
class SyncOutcome:
    """Result of a sync run."""

    docs_path: Path
    selection: ChangeSelection
    results: List[FunctionSyncResult] = field(default_factory=list)
    skipped_files: List[tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False
    diff: str = ""

    @property
    def updated(self) -> List[str]:
        return [result.name for result in self.results if result.status is PatchStatus.UPDATED]

    @property
    def warnings(self) -> List[str]:
        messages: List[str] = []
        if self.selection.warning:
            messages.append(self.selection.warning)
        for result in self.results:
            if result.status is PatchStatus.REGION_NOT_FOUND:
                messages.append(f'Documentation markers for "{result.name}" not found')
            elif result.status is PatchStatus.DUPLICATE_REGION:
                messages.append(f'Documentation markers for "{result.name}" are duplicated')
        for path, error in self.skipped_files:
            messages.append(f"Skipped {path}: {error}")
        return messages


class TextGenerator(Protocol):
    def generate(self, request: GenerationRequest) -> str: ...


class Orchestrator:
    """Coordinates the analysis and documentation sync pipelines."""

    def __init__(
        self,
        discovery: FileDiscovery | None = None,
        parser: SourceParser | None = None,
        extractor: FunctionExtractor | None = None,
        marker_manager: MarkerManager | None = None,
        history_factory: Callable[[Path], RevisionHistory] | None = None,
        client_factory: Callable[[GenerationConfig], TextGenerator] | None = None,
        config_loader: Callable[[Path], LiveDocConfig] = load_config,
    ) -> None:
        self.discovery = discovery or FileDiscovery()
        self.parser = parser or SourceParser()
        self.extractor = extractor or FunctionExtractor()
        self.marker_manager = marker_manager or MarkerManager()
        self._history_factory = history_factory or GitHistory
        self._client_factory = client_factory or GenerationClient.from_config
        self._config_loader = config_loader
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # Analysis pipeline

    def run_analysis(
        self,
        path: str | Path,
        *,
        patterns: Optional[Sequence[str]] = None,
        top_n: Optional[int] = None,
    ) -> AnalysisOutcome:
        root = Path(path).expanduser().resolve()
        config = self._config_loader(root)
        self.logger.info("Searching for source files in: %s", root)
        files = self.discovery.find(
            root,
            patterns=tuple(patterns) if patterns else config.analysis.patterns,
            exclude=config.analysis.exclude,
        )
        self.logger.info("Found %d source files", len(files))

        analyzer = FileAnalyzer(parser=self.parser, extractor=self.extractor)
        analyses = analyzer.analyze_many(files)
        aggregator = AnalysisAggregator(
            top_n=top_n if top_n is not None else config.analysis.top_n,
            root=root,
        )
        return AnalysisOutcome(
            root=root,
            analyses=analyses,
            summary=aggregator.summarize(analyses),
            breakdown=aggregator.kind_breakdown(analyses),
            report=aggregator.render(analyses),
        )

    # ------------------------------------------------------------------
    # Sync pipeline

    def run_sync(self, path: str | Path, *, dry_run: bool = False) -> SyncOutcome:
        """Regenerate documentation regions for exported functions that changed.

        Raises NotADirectoryError when ``path`` is not a directory, ConfigError
        when no credential is configured, FileNotFoundError when the repository
        or the document is missing, and GenerationError subclasses when the
        service call for a function fails; any of these abort the run.
        """
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Repository path not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {path}")
        config = self._config_loader(root)
        require_api_key(config)
        docs_path = config.docs_path
        if not docs_path.is_file():
            raise FileNotFoundError(f"Documentation file not found: {docs_path}")

        client = self._client_factory(config.generation)
        builder = PromptBuilder(
            config.templates_dir,
            options=GenerationOptions(
                temperature=config.generation.temperature,
                max_output_tokens=config.generation.max_output_tokens,
            ),
        )
        patcher = DocumentPatcher(docs_path, self.marker_manager, dry_run=dry_run)

        self.logger.info("Living documentation sync started for %s", root)
        selection = self._select_changes(root, config)
        outcome = SyncOutcome(docs_path=docs_path, selection=selection, dry_run=dry_run)
        if not selection.files:
            self.logger.info("No relevant source files changed. Exiting.")
            return outcome

        self.logger.info("Changed files: %s", ", ".join(selection.files))
        for file_path in selection.files:
            source_path = root / file_path
            try:
                source = read_source(source_path)
                tree = self.parser.parse(source)
            except (OSError, UnicodeDecodeError, ParseError) as exc:
                self.logger.warning("Skipping %s: %s", file_path, exc)
                outcome.skipped_files.append((file_path, str(exc)))
                continue

            for snippet in self.extractor.extract_exported(tree, file_path):
                self.logger.info('Found changed/new function: "%s" in %s', snippet.name, file_path)
                text = client.generate(builder.build(snippet))
                result = patcher.apply(snippet.name, text)
                outcome.results.append(
                    FunctionSyncResult(name=snippet.name, file_path=file_path, status=result.status)
                )

        if dry_run:
            outcome.diff = self._render_diff(docs_path, patcher.original_text, patcher.current_text)
        self.logger.info("Living documentation sync finished.")
        return outcome

    def _select_changes(self, root: Path, config: LiveDocConfig) -> ChangeSelection:
        def fallback() -> List[str]:
            files = self.discovery.find(
                root,
                patterns=(config.sync.source_pattern,),
                exclude=config.analysis.exclude,
            )
            return [path.relative_to(root).as_posix() for path in files]

        selector = ChangeSelector(
            self._history_factory(root),
            fallback,
            prefix=config.sync.path_prefix,
            extensions=config.sync.extensions,
        )
        selection = selector.select()
        if selection.state is SelectionState.DIFF_FAILED:
            self.logger.warning("Change detection failed; no functions will be documented this run.")
        return selection

    @staticmethod
    def _render_diff(docs_path: Path, before: str, after: str) -> str:
        diff = difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"{docs_path.name} (current)",
            tofile=f"{docs_path.name} (proposed)",
        )
        return "".join(diff)


__all__ = ["AnalysisOutcome", "FunctionSyncResult", "Orchestrator", "SyncOutcome"]
