"""Managed marker regions for per-function documentation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from ..logging import get_logger


class PatchStatus(str, Enum):
    """Outcome of replacing one marker region."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    REGION_NOT_FOUND = "region_not_found"
    DUPLICATE_REGION = "duplicate_region"


@dataclass(frozen=True)
class PatchResult:
    """Patched document text plus what happened to the region."""

    function_name: str
    status: PatchStatus
    text: str

    @property
    def applied(self) -> bool:
        return self.status in (PatchStatus.UPDATED, PatchStatus.UNCHANGED)


class MarkerManager:
    """Locates and rewrites ``DOCS:START``/``DOCS:END`` sentinel pairs."""

    START_FMT = "<!-- DOCS:START:{name} -->"
    END_FMT = "<!-- DOCS:END:{name} -->"

    def wrap(self, name: str, body: str) -> str:
        """Render a complete region for ``name``."""
        start = self.START_FMT.format(name=name)
        end = self.END_FMT.format(name=name)
        return f"{start}{self._interior(body)}{end}"

    def replace(self, markdown: str, name: str, new_body: str) -> PatchResult:
        """Replace the interior of the region for ``name``; text outside it is kept."""
        start = self.START_FMT.format(name=name)
        end = self.END_FMT.format(name=name)

        if markdown.count(start) > 1 or markdown.count(end) > 1:
            return PatchResult(name, PatchStatus.DUPLICATE_REGION, markdown)

        start_index = markdown.find(start)
        end_index = markdown.find(end)
        if start_index == -1 or end_index == -1:
            return PatchResult(name, PatchStatus.REGION_NOT_FOUND, markdown)
        body_start = start_index + len(start)
        if end_index < body_start:
            return PatchResult(name, PatchStatus.REGION_NOT_FOUND, markdown)

        updated = f"{markdown[:body_start]}{self._interior(new_body)}{markdown[end_index:]}"
        status = PatchStatus.UNCHANGED if updated == markdown else PatchStatus.UPDATED
        return PatchResult(name, status, updated)

    def extract(self, markdown: str) -> Dict[str, str]:
        """Return a mapping of region name to its current interior (stripped)."""
        blocks: Dict[str, str] = {}
        start_token = "<!-- DOCS:START:"
        position = 0
        while True:
            start_index = markdown.find(start_token, position)
            if start_index == -1:
                break
            name_start = start_index + len(start_token)
            name_end = markdown.find(" -->", name_start)
            if name_end == -1:
                break
            name = markdown[name_start:name_end]
            end_token = self.END_FMT.format(name=name)
            body_start = name_end + len(" -->")
            end_index = markdown.find(end_token, body_start)
            if end_index == -1:
                position = body_start
                continue
            blocks[name] = markdown[body_start:end_index].strip()
            position = end_index + len(end_token)
        return blocks

    @staticmethod
    def _interior(body: str) -> str:
        cleaned = body.strip("\n").rstrip()
        return f"\n{cleaned}\n"


class DocumentPatcher:
    """Applies region replacements to one document, one function at a time.

    The document is re-read before every patch so each replacement works on
    the latest text. In dry-run mode nothing is written; the pending text is
    kept in memory and later patches build on it.
    """

    def __init__(
        self,
        path: Path | str,
        markers: MarkerManager | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.path = Path(path)
        self.markers = markers or MarkerManager()
        self.dry_run = dry_run
        self.logger = get_logger("postproc.markers")
        self._original: Optional[str] = None
        self._pending: Optional[str] = None

    @property
    def original_text(self) -> str:
        if self._original is None:
            self._original = self._read()
        return self._original

    @property
    def current_text(self) -> str:
        if self.dry_run and self._pending is not None:
            return self._pending
        return self._read()

    def apply(self, function_name: str, content: str) -> PatchResult:
        if self._original is None:
            self._original = self._read()
        result = self.markers.replace(self.current_text, function_name, content)

        if result.status is PatchStatus.REGION_NOT_FOUND:
            self.logger.warning(
                'Documentation markers for "%s" not found in %s. Skipping.',
                function_name,
                self.path.name,
            )
        elif result.status is PatchStatus.DUPLICATE_REGION:
            self.logger.warning(
                'Documentation markers for "%s" appear more than once in %s. Skipping.',
                function_name,
                self.path.name,
            )
        elif result.status is PatchStatus.UNCHANGED:
            self.logger.info('Documentation for "%s" already up to date.', function_name)
        elif self.dry_run:
            self._pending = result.text
            self.logger.info('Would update documentation for "%s" (dry-run).', function_name)
        else:
            self._write(result.text)
            self.logger.info('Successfully updated documentation for "%s".', function_name)
        return result

    # Line endings pass through untranslated in both directions.
    def _read(self) -> str:
        with open(self.path, encoding="utf-8", newline="") as handle:
            return handle.read()

    def _write(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)


__all__ = ["DocumentPatcher", "MarkerManager", "PatchResult", "PatchStatus"]
