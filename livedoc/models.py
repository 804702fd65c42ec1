"""Core data models shared across livedoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

ANONYMOUS = "anonymous"
COMPUTED = "computed"


class FunctionKind(str, Enum):
    """Syntactic form a recorded function takes."""

    DECLARATION = "declaration"
    ARROW = "arrow"
    EXPRESSION = "expression"
    METHOD = "method"


class MethodKind(str, Enum):
    """Role of a method definition inside a class or object literal."""

    METHOD = "method"
    CONSTRUCTOR = "constructor"
    GET = "get"
    SET = "set"


@dataclass(frozen=True)
class FunctionRecord:
    """Normalized metadata for one function-like construct."""

    kind: FunctionKind
    name: str = ANONYMOUS
    source_line: Optional[int] = None
    is_async: bool = False
    is_generator: bool = False
    param_count: int = 0
    method_kind: Optional[MethodKind] = None

    def __post_init__(self) -> None:
        if self.param_count < 0:
            raise ValueError("param_count must be non-negative")
        if self.source_line is not None and self.source_line < 1:
            raise ValueError("source_line is 1-based")
        if self.method_kind is not None and self.kind is not FunctionKind.METHOD:
            raise ValueError("method_kind only applies to method records")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "line": self.source_line,
            "isAsync": self.is_async,
            "isGenerator": self.is_generator,
            "paramCount": self.param_count,
        }
        if self.method_kind is not None:
            payload["methodKind"] = self.method_kind.value
        return payload


@dataclass
class FileAnalysis:
    """Extraction result for a single source file."""

    path: str
    functions: List[FunctionRecord] = field(default_factory=list)
    function_count: int = 0
    line_count: int = 0
    byte_size: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, path: str, error: str) -> "FileAnalysis":
        return cls(path=path, error=error)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "path": self.path,
            "functions": [record.to_dict() for record in self.functions],
            "functionCount": self.function_count,
            "lineCount": self.line_count,
            "size": self.byte_size,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class AnalysisSummary:
    """Aggregate counters over a batch of file analyses."""

    total_files: int = 0
    successfully_parsed: int = 0
    total_functions: int = 0
    total_lines: int = 0
    total_size: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class ExportedFunctionSnippet:
    """Top-level exported function declaration and its exact source text."""

    name: str
    source_text: str
    file_path: str


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling options forwarded to the generation service."""

    temperature: float = 0.2
    max_output_tokens: int = 1024


@dataclass(frozen=True)
class GenerationRequest:
    """Prompt plus options for documenting one function."""

    prompt: str
    options: GenerationOptions = field(default_factory=GenerationOptions)
    function_name: Optional[str] = None
