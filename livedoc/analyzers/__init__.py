"""Source parsing, function extraction and inventory aggregation."""

from .aggregate import AnalysisAggregator
from .files import FileAnalyzer, read_source
from .functions import FunctionExtractor, extract_functions
from .parser import ParseError, SourceParser, SyntaxTree

__all__ = [
    "AnalysisAggregator",
    "FileAnalyzer",
    "FunctionExtractor",
    "ParseError",
    "SourceParser",
    "SyntaxTree",
    "extract_functions",
    "read_source",
]
