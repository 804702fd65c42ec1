"""Tree-sitter powered source parser for JavaScript and TypeScript."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree


class ParseError(ValueError):
    """Raised when source text cannot be parsed without syntax errors."""

    def __init__(
        self, message: str, *, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


@dataclass(frozen=True)
class SyntaxTree:
    """Parsed tree together with the bytes it was parsed from."""

    tree: Tree
    source: bytes

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class SourceParser:
    """Parses module source with the TSX grammar.

    TSX is the widest grammar tree-sitter ships for this family: ES modules,
    TypeScript annotations, decorators and JSX all parse with one fixed
    configuration, so callers never pick a dialect per file.
    """

    def __init__(self) -> None:
        self._language = Language(ts_typescript.language_tsx())
        self._parser = Parser(self._language)

    def parse(self, source: str) -> SyntaxTree:
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        syntax_tree = SyntaxTree(tree=tree, source=source_bytes)
        if tree.root_node.has_error:
            raise self._error_for(syntax_tree)
        return syntax_tree

    def _error_for(self, syntax_tree: SyntaxTree) -> ParseError:
        node = _first_error_node(syntax_tree.root)
        if node is None:
            return ParseError("Syntax error")
        line = node.start_point[0] + 1
        column = node.start_point[1]
        if node.is_missing:
            message = f'Missing "{node.type}" ({line}:{column})'
        else:
            lines = syntax_tree.text(node).strip().splitlines()
            snippet = lines[0][:20] if lines else ""
            if snippet:
                message = f'Unexpected token "{snippet}" ({line}:{column})'
            else:
                message = f"Unexpected token ({line}:{column})"
        return ParseError(message, line=line, column=column)


def _first_error_node(root: Node) -> Optional[Node]:
    for node in _iter_error_candidates(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def _iter_error_candidates(node: Node) -> Iterator[Node]:
    # Only subtrees flagged with has_error can contain the offending node.
    yield node
    for child in node.children:
        if child.has_error or child.is_missing:
            yield from _iter_error_candidates(child)


__all__ = ["ParseError", "SourceParser", "SyntaxTree"]
