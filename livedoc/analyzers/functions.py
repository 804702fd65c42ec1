"""Function inventory extraction over tree-sitter syntax trees."""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

from tree_sitter import Node

from ..logging import get_logger
from ..models import (
    ANONYMOUS,
    COMPUTED,
    ExportedFunctionSnippet,
    FunctionKind,
    FunctionRecord,
    MethodKind,
)
from .parser import ParseError, SourceParser, SyntaxTree

logger = get_logger("analyzers.functions")

_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
_GENERATOR_TYPES = frozenset({"generator_function_declaration", "generator_function"})
_STATIC_KEY_TYPES = frozenset({"property_identifier", "private_property_identifier", "number"})


def _walk(root: Node) -> Iterator[Node]:
    """Yield every named node in pre-order, depth-first document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_named:
            yield node
        stack.extend(reversed(node.children))


def _has_token(node: Node, token: str) -> bool:
    return any(not child.is_named and child.type == token for child in node.children)


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _param_count(node: Node) -> int:
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        # ``x => x`` binds a single bare parameter.
        return 1 if node.child_by_field_name("parameter") is not None else 0
    return sum(1 for child in parameters.named_children if child.type != "comment")


def _is_generator(node: Node) -> bool:
    return node.type in _GENERATOR_TYPES or _has_token(node, "*")


def _record_declaration(node: Node, tree: SyntaxTree) -> FunctionRecord:
    name_node = node.child_by_field_name("name")
    return FunctionRecord(
        kind=FunctionKind.DECLARATION,
        name=tree.text(name_node) if name_node is not None else ANONYMOUS,
        source_line=_line(node),
        is_async=_has_token(node, "async"),
        is_generator=_is_generator(node),
        param_count=_param_count(node),
    )


def _record_arrow(node: Node, tree: SyntaxTree) -> FunctionRecord:
    return FunctionRecord(
        kind=FunctionKind.ARROW,
        source_line=_line(node),
        is_async=_has_token(node, "async"),
        param_count=_param_count(node),
    )


def _record_expression(node: Node, tree: SyntaxTree) -> FunctionRecord:
    # Named function expressions are still reported as anonymous.
    return FunctionRecord(
        kind=FunctionKind.EXPRESSION,
        source_line=_line(node),
        is_async=_has_token(node, "async"),
        is_generator=_is_generator(node),
        param_count=_param_count(node),
    )


def _record_method(node: Node, tree: SyntaxTree) -> FunctionRecord:
    name = _method_name(node, tree)
    return FunctionRecord(
        kind=FunctionKind.METHOD,
        name=name,
        source_line=_line(node),
        is_async=_has_token(node, "async"),
        is_generator=_is_generator(node),
        param_count=_param_count(node),
        method_kind=_method_kind(node, name),
    )


def _method_name(node: Node, tree: SyntaxTree) -> str:
    key = node.child_by_field_name("name")
    if key is None:
        return COMPUTED
    if key.type in _STATIC_KEY_TYPES:
        return tree.text(key)
    if key.type == "string":
        return tree.text(key)[1:-1]
    return COMPUTED


def _method_kind(node: Node, name: str) -> MethodKind:
    if _has_token(node, "get"):
        return MethodKind.GET
    if _has_token(node, "set"):
        return MethodKind.SET
    parent = node.parent
    in_class = parent is not None and parent.type == "class_body"
    if in_class and name == "constructor" and not _has_token(node, "static"):
        return MethodKind.CONSTRUCTOR
    return MethodKind.METHOD


_Recorder = Callable[[Node, SyntaxTree], FunctionRecord]

_RECORDERS: Dict[str, _Recorder] = {
    "function_declaration": _record_declaration,
    "generator_function_declaration": _record_declaration,
    "arrow_function": _record_arrow,
    "function_expression": _record_expression,
    # Older grammars call function expressions ``function``.
    "function": _record_expression,
    "generator_function": _record_expression,
    "method_definition": _record_method,
}


class FunctionExtractor:
    """Collects function records from a parsed module."""

    def __init__(self, recorders: Optional[Dict[str, _Recorder]] = None) -> None:
        self._recorders = dict(recorders) if recorders is not None else dict(_RECORDERS)

    def extract(self, tree: SyntaxTree) -> List[FunctionRecord]:
        """Return every function-like node in document order.

        The recorder table only decides whether a node is reported; the walk
        always descends into every child, so functions nested anywhere
        (callbacks, class fields, object literals) are found.
        """
        records: List[FunctionRecord] = []
        for node in _walk(tree.root):
            recorder = self._recorders.get(node.type)
            if recorder is not None:
                records.append(recorder(node, tree))
        return records

    def extract_exported(self, tree: SyntaxTree, file_path: str) -> List[ExportedFunctionSnippet]:
        """Return top-level ``export function`` declarations with their source text.

        Only direct children of the module are inspected. Default exports and
        exported bindings (``export const f = () => ...``) are not included.
        """
        snippets: List[ExportedFunctionSnippet] = []
        for statement in tree.root.named_children:
            if statement.type != "export_statement" or _has_token(statement, "default"):
                continue
            declaration = statement.child_by_field_name("declaration")
            if declaration is None or declaration.type not in _DECLARATION_TYPES:
                continue
            name_node = declaration.child_by_field_name("name")
            if name_node is None:
                continue
            snippets.append(
                ExportedFunctionSnippet(
                    name=tree.text(name_node),
                    source_text=tree.text(declaration),
                    file_path=file_path,
                )
            )
        return snippets


def extract_functions(source: str, parser: SourceParser | None = None) -> List[FunctionRecord]:
    """Parse ``source`` and return its functions, or ``[]`` when it does not parse."""
    parser = parser or SourceParser()
    try:
        tree = parser.parse(source)
    except ParseError as exc:
        logger.warning("Parse error: %s", exc)
        return []
    return FunctionExtractor().extract(tree)


__all__ = ["FunctionExtractor", "extract_functions"]
