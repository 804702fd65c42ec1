"""Corpus summary and report rendering for function inventories."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

from ..models import AnalysisSummary, FileAnalysis, FunctionKind

_REPORT_TITLE = "=== CODE ANALYSIS REPORT ==="


class AnalysisAggregator:
    """Summarises a batch of FileAnalysis results. Pure; performs no I/O."""

    def __init__(self, top_n: int = 10, root: Path | str | None = None) -> None:
        self.top_n = max(0, top_n)
        self.root = Path(root) if root is not None else None

    def summarize(self, analyses: Sequence[FileAnalysis]) -> AnalysisSummary:
        summary = AnalysisSummary(total_files=len(analyses))
        for analysis in analyses:
            if analysis.error is not None:
                summary.errors.append((analysis.path, analysis.error))
                continue
            summary.successfully_parsed += 1
            summary.total_functions += analysis.function_count
            summary.total_lines += analysis.line_count
            summary.total_size += analysis.byte_size
        return summary

    def kind_breakdown(self, analyses: Sequence[FileAnalysis]) -> Dict[str, int]:
        counts: Counter[FunctionKind] = Counter(
            record.kind for analysis in analyses for record in analysis.functions
        )
        return {kind.value: counts[kind] for kind in FunctionKind if counts[kind]}

    def top_files(self, analyses: Sequence[FileAnalysis]) -> List[FileAnalysis]:
        # sorted() is stable, so equal counts keep their input order.
        parsed = [analysis for analysis in analyses if analysis.ok]
        ranked = sorted(parsed, key=lambda analysis: -analysis.function_count)
        return ranked[: self.top_n]

    def render(self, analyses: Sequence[FileAnalysis]) -> str:
        summary = self.summarize(analyses)
        lines: List[str] = [_REPORT_TITLE, ""]

        lines.append("SUMMARY:")
        lines.append(f"   Total files: {summary.total_files}")
        lines.append(f"   Successfully parsed: {summary.successfully_parsed}")
        lines.append(f"   Total functions: {summary.total_functions}")
        lines.append(f"   Total lines: {summary.total_lines:,}")
        lines.append(f"   Total size: {summary.total_size / 1024:.2f} KB")
        lines.append("")

        lines.append("FUNCTION BREAKDOWN:")
        for kind, count in self.kind_breakdown(analyses).items():
            lines.append(f"   {kind}: {count}")
        lines.append("")

        lines.append("TOP FILES BY FUNCTION COUNT:")
        for analysis in self.top_files(analyses):
            lines.append(f"   {self._display_path(analysis.path)}: {analysis.function_count} functions")

        if summary.errors:
            lines.append("")
            lines.append(f"ERRORS ({len(summary.errors)}):")
            for path, error in summary.errors:
                lines.append(f"   {self._display_path(path)}: {error}")

        return "\n".join(lines) + "\n"

    def _display_path(self, path: str) -> str:
        if self.root is None:
            return path
        try:
            return Path(path).relative_to(self.root).as_posix()
        except ValueError:
            return path


__all__ = ["AnalysisAggregator"]
