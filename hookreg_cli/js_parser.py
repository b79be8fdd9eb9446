"""JavaScript parsing via Tree-sitter, exposed through an ESTree-shaped view.

The analysis code only ever sees :class:`JsNode`, a read-only wrapper over a
tree-sitter node that answers the ESTree questions the extractor asks
(``object``, ``property``, ``computed``, ``callee``, ``arguments`` ...).
Wrapping is lazy, so huge or deeply nested sources cost nothing until a
subtree is actually visited.

Tree-sitter is error tolerant; by default any ERROR/MISSING node in the tree
is reported as a :class:`~hookreg_cli.errors.JsParseError` so callers get a
clear parse failure instead of a half-analysed file.
"""

from __future__ import annotations

import importlib
import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .errors import JsParseError, ParserUnavailableError

logger = logging.getLogger(__name__)

GRAMMAR_MODULE = "tree_sitter_javascript"


class NodeKind(str, Enum):
    PROGRAM = "Program"
    IDENTIFIER = "Identifier"
    THIS = "ThisExpression"
    LITERAL = "Literal"
    MEMBER = "MemberExpression"
    CALL = "CallExpression"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION = "ArrowFunctionExpression"
    OBJECT = "ObjectExpression"
    PROPERTY = "Property"
    ASSIGNMENT = "AssignmentExpression"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    OTHER = "Other"


FUNCTION_KINDS = frozenset({NodeKind.FUNCTION_EXPRESSION, NodeKind.ARROW_FUNCTION})

_KIND_BY_TS_TYPE: Dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "identifier": NodeKind.IDENTIFIER,
    "property_identifier": NodeKind.IDENTIFIER,
    "private_property_identifier": NodeKind.IDENTIFIER,
    "shorthand_property_identifier": NodeKind.IDENTIFIER,
    "undefined": NodeKind.IDENTIFIER,
    "this": NodeKind.THIS,
    "string": NodeKind.LITERAL,
    "number": NodeKind.LITERAL,
    "true": NodeKind.LITERAL,
    "false": NodeKind.LITERAL,
    "null": NodeKind.LITERAL,
    "regex": NodeKind.LITERAL,
    "member_expression": NodeKind.MEMBER,
    "subscript_expression": NodeKind.MEMBER,
    "call_expression": NodeKind.CALL,
    "function_declaration": NodeKind.FUNCTION_DECLARATION,
    "generator_function_declaration": NodeKind.FUNCTION_DECLARATION,
    "function_expression": NodeKind.FUNCTION_EXPRESSION,
    "function": NodeKind.FUNCTION_EXPRESSION,
    "generator_function": NodeKind.FUNCTION_EXPRESSION,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "object": NodeKind.OBJECT,
    "pair": NodeKind.PROPERTY,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "augmented_assignment_expression": NodeKind.ASSIGNMENT,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
}

# Members of an object literal that become Property nodes.
_OBJECT_MEMBER_TYPES = {"pair", "method_definition", "shorthand_property_identifier"}

_SKIPPED_TYPES = {"comment", "html_comment"}


def _named_children(ts_node: Any) -> List[Any]:
    return [c for c in ts_node.named_children if c.type not in _SKIPPED_TYPES]


def _unwrap_parens(ts_node: Any) -> Any:
    """Parenthesized expressions are transparent, as in ESTree."""
    while ts_node is not None and ts_node.type == "parenthesized_expression":
        inner = _named_children(ts_node)
        if len(inner) != 1:
            break
        ts_node = inner[0]
    return ts_node


class JsNode:
    """Read-only ESTree-style view over one tree-sitter node.

    Missing fields come back as ``None`` (or an empty list) rather than
    raising, so a partial tree degrades into skipped extractions.
    """

    __slots__ = ("_ts", "_source", "kind")

    def __init__(self, ts_node: Any, source: bytes, kind: Optional[NodeKind] = None) -> None:
        self._ts = ts_node
        self._source = source
        self.kind = kind or _KIND_BY_TS_TYPE.get(ts_node.type, NodeKind.OTHER)

    def __repr__(self) -> str:
        return f"JsNode({self.kind.value}, {self.type!r}, line={self.line})"

    # -- plumbing ----------------------------------------------------------

    def _wrap(self, ts_node: Any, kind: Optional[NodeKind] = None) -> Optional["JsNode"]:
        ts_node = _unwrap_parens(ts_node)
        if ts_node is None:
            return None
        return JsNode(ts_node, self._source, kind)

    def _field(self, name: str) -> Optional["JsNode"]:
        return self._wrap(self._ts.child_by_field_name(name))

    @property
    def type(self) -> str:
        """Raw tree-sitter node type."""
        return self._ts.type

    @property
    def text(self) -> str:
        return self._source[self._ts.start_byte:self._ts.end_byte].decode("utf-8", errors="replace")

    @property
    def line(self) -> int:
        return self._ts.start_point[0] + 1

    # -- leaves ------------------------------------------------------------

    @property
    def name(self) -> Optional[str]:
        if self.kind is NodeKind.IDENTIFIER:
            return self.text
        return None

    @property
    def literal(self) -> Optional[str]:
        """Literal value as text; string quotes are stripped."""
        if self.kind is not NodeKind.LITERAL:
            return None
        raw = self.text
        if self.type == "string" and len(raw) >= 2:
            return raw[1:-1]
        return raw

    # -- member / call -----------------------------------------------------

    @property
    def computed(self) -> bool:
        if self.kind is NodeKind.MEMBER:
            return self.type == "subscript_expression"
        if self.kind is NodeKind.PROPERTY:
            key = self._key_ts()
            return key is not None and key.type == "computed_property_name"
        return False

    @property
    def object(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.MEMBER:
            return None
        return self._field("object")

    @property
    def callee(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.CALL:
            return None
        return self._field("function")

    @property
    def arguments(self) -> List["JsNode"]:
        if self.kind is not NodeKind.CALL:
            return []
        args = self._ts.child_by_field_name("arguments")
        if args is None:
            return []
        if args.type != "arguments":
            # tagged template: the template is the single argument
            return [JsNode(args, self._source)]
        return [JsNode(_unwrap_parens(a), self._source) for a in _named_children(args)]

    # -- functions ---------------------------------------------------------

    @property
    def id(self) -> Optional["JsNode"]:
        if self.kind in (NodeKind.FUNCTION_DECLARATION, NodeKind.FUNCTION_EXPRESSION):
            if self.type == "method_definition":
                return None
            return self._field("name")
        if self.kind is NodeKind.VARIABLE_DECLARATOR:
            return self._field("name")
        return None

    @property
    def params(self) -> List["JsNode"]:
        if self.kind not in (
            NodeKind.FUNCTION_DECLARATION,
            NodeKind.FUNCTION_EXPRESSION,
            NodeKind.ARROW_FUNCTION,
        ):
            return []
        single = self._ts.child_by_field_name("parameter")
        if single is not None:
            return [JsNode(single, self._source)]
        params = self._ts.child_by_field_name("parameters")
        if params is None:
            return []
        return [JsNode(p, self._source) for p in _named_children(params)]

    @property
    def body(self) -> Optional["JsNode"]:
        return self._field("body")

    # -- declarations / assignments ----------------------------------------

    @property
    def init(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.VARIABLE_DECLARATOR:
            return None
        return self._field("value")

    @property
    def left(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.ASSIGNMENT:
            return None
        return self._field("left")

    @property
    def right(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.ASSIGNMENT:
            return None
        return self._field("right")

    # -- objects -----------------------------------------------------------

    @property
    def properties(self) -> List["JsNode"]:
        if self.kind is not NodeKind.OBJECT:
            return []
        members: List[JsNode] = []
        for child in _named_children(self._ts):
            if child.type in _OBJECT_MEMBER_TYPES:
                members.append(JsNode(child, self._source, NodeKind.PROPERTY))
            else:
                members.append(JsNode(child, self._source))
        return members

    def _key_ts(self) -> Any:
        if self.type == "shorthand_property_identifier":
            return self._ts
        if self.type == "method_definition":
            return self._ts.child_by_field_name("name")
        return self._ts.child_by_field_name("key")

    @property
    def key(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.PROPERTY:
            return None
        key = self._key_ts()
        if key is None:
            return None
        if key.type == "computed_property_name":
            inner = _named_children(key)
            return self._wrap(inner[0]) if inner else None
        if key.type == "shorthand_property_identifier":
            return JsNode(key, self._source, NodeKind.IDENTIFIER)
        return JsNode(key, self._source)

    @property
    def value(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.PROPERTY:
            return None
        if self.type == "method_definition":
            return JsNode(self._ts, self._source, NodeKind.FUNCTION_EXPRESSION)
        if self.type == "shorthand_property_identifier":
            return JsNode(self._ts, self._source, NodeKind.IDENTIFIER)
        return self._field("value")

    # -- traversal ---------------------------------------------------------

    def children(self) -> List["JsNode"]:
        """Child nodes in ESTree field order."""
        kind = self.kind
        if kind is NodeKind.MEMBER:
            fields: List[Optional[JsNode]] = [self.object, self.property]
        elif kind is NodeKind.CALL:
            fields = [self.callee, *self.arguments]
        elif kind in (
            NodeKind.FUNCTION_DECLARATION,
            NodeKind.FUNCTION_EXPRESSION,
            NodeKind.ARROW_FUNCTION,
        ):
            fields = [self.id, *self.params, self.body]
        elif kind is NodeKind.PROPERTY:
            if self.type == "shorthand_property_identifier":
                fields = [self.key]
            else:
                fields = [self.key, self.value]
        elif kind is NodeKind.ASSIGNMENT:
            fields = [self.left, self.right]
        elif kind is NodeKind.VARIABLE_DECLARATOR:
            fields = [self.id, self.init]
        elif kind is NodeKind.OBJECT:
            fields = list(self.properties)
        elif kind in (NodeKind.IDENTIFIER, NodeKind.THIS, NodeKind.LITERAL):
            fields = []
        else:
            fields = [self._wrap(c) for c in _named_children(self._ts)]
        return [f for f in fields if f is not None]

    def walk(self) -> Iterator["JsNode"]:
        """Unbounded pre-order walk with an explicit stack."""
        stack: List[JsNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    # Defined last: the name shadows the builtin decorator in the class body.
    @property
    def property(self) -> Optional["JsNode"]:
        if self.kind is not NodeKind.MEMBER:
            return None
        if self.computed:
            return self._field("index")
        return self._field("property")


# ===================================================================
# Parser
# ===================================================================

class JavaScriptParser:
    """Thin wrapper around a tree-sitter parser for JavaScript."""

    def __init__(self) -> None:
        self._parser = self._load_parser()

    @staticmethod
    def _load_parser() -> Any:
        try:
            from tree_sitter import Language, Parser as TSParser  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ParserUnavailableError(
                "tree-sitter is not installed. Install with: pip install tree-sitter"
            ) from exc

        try:
            mod = importlib.import_module(GRAMMAR_MODULE)
        except ImportError as exc:
            raise ParserUnavailableError(
                f"Grammar package '{GRAMMAR_MODULE}' is not installed. "
                "Install with: pip install tree-sitter-javascript"
            ) from exc

        parser = TSParser(Language(mod.language()))
        logger.debug("Loaded tree-sitter parser for javascript")
        return parser

    def parse(self, source: str, tolerant: bool = False) -> JsNode:
        """Parse *source* and return the Program node.

        Raises:
            JsParseError: the source is empty, or contains syntax errors and
                *tolerant* is False.
        """
        if not source or not source.strip():
            raise JsParseError("source is empty")

        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else None
            column = bad.start_point[1] + 1 if bad is not None else None
            if bad is not None and bad.is_missing:
                message = f"missing '{bad.type}'"
            else:
                message = "unexpected token"
            if not tolerant:
                raise JsParseError(f"SyntaxError: {message}", line, column)
            logger.warning("Parsing with errors at line %s, column %s: %s", line, column, message)

        return JsNode(root, source_bytes)


def _first_error(root: Any) -> Optional[Any]:
    """Locate the first ERROR or MISSING node in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return None


def parse_source(source: str, tolerant: bool = False) -> JsNode:
    """Parse with a fresh parser so concurrent analyses share nothing."""
    return JavaScriptParser().parse(source, tolerant=tolerant)
