"""
S-expression tree dumps.

The checker runs on trees produced by an earlier compiler stage.  To feed it
trees from files, tests and the command line, this module reads and writes
a small S-expression notation:

    ; a comment runs to the end of the line
    (program
      (function f (params x)
        (body (return (binary-expression + (id x) (id y))))))

Syntax
------
* ``(kind item*)`` is a node.  ``kind`` is the kebab-case name of a
  ``ParseTreeType`` (``function-declaration``, ``identifier-expression``),
  or one of the short aliases in ``TAG_ALIASES``.
* Items fill the node's structural fields in declaration order.  A name
  field takes a symbol or a string atom; a child field takes a node; the
  trailing "many" field, when the node has one, takes the remaining items.
* ``nil`` stands for an absent optional field.  Trailing optional fields
  may be left out altogether.
* In binding position (parameters, declarators, function names, catch
  bindings, pattern leaves) a bare symbol is a ``BindingIdentifier``.
* Any other bare atom where a node is expected is a ``Literal``: numbers,
  strings (JSON escapes), ``true``, ``false`` and ``null``.

Every node's location is the position of its opening parenthesis (or of
the atom, for a bare literal or binding).  Lines and columns are 1-based.
"""

from __future__ import annotations

import json
import math
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from freevars import ast as A
from freevars.errors import FreeVarErrorCodes, TreeSyntaxError

logger = logging.getLogger(__name__)

__all__ = [
    "SEXP_GRAMMAR",
    "TAG_ALIASES",
    "read_tree",
    "read_tree_file",
    "write_tree",
]


# ═══════════════════════════════════════════════════════════════════
#  PART 1: GRAMMAR (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

SEXP_GRAMMAR = Grammar(r'''
    document    = _ expr _
    expr        = list / atom
    list        = "(" _ item* ")"
    item        = expr _

    atom        = string / number / symbol
    string      = ~r'"(?:[^"\\]|\\.)*"'
    number      = ~r'-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?(?![^\s();"])'
    symbol      = ~r'[^\s();"]+'

    _           = ~r'(?:\s|;[^\n]*)*'
''')

NIL = "nil"

_SYMBOL_RE = re.compile(r'[^\s();"]+')
_NUMBER_RE = re.compile(r'-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?')

_KEYWORD_LITERALS: Dict[str, A.LiteralValue] = {
    "true": True,
    "false": False,
    "null": None,
}

#: Short spellings accepted by the reader.  ``write_tree`` always emits the
#: full kebab-case tag.
TAG_ALIASES: Dict[str, A.ParseTreeType] = {
    "id": A.ParseTreeType.IDENTIFIER_EXPRESSION,
    "binding": A.ParseTreeType.BINDING_IDENTIFIER,
    "params": A.ParseTreeType.FORMAL_PARAMETER_LIST,
    "body": A.ParseTreeType.FUNCTION_BODY,
    "function": A.ParseTreeType.FUNCTION_DECLARATION,
    "var": A.ParseTreeType.VARIABLE_STATEMENT,
    "decl": A.ParseTreeType.VARIABLE_DECLARATION,
    "expr": A.ParseTreeType.EXPRESSION_STATEMENT,
    "call": A.ParseTreeType.CALL_EXPRESSION,
    "return": A.ParseTreeType.RETURN_STATEMENT,
}

_KINDS_BY_TAG: Dict[str, A.ParseTreeType] = {
    kind.tag: kind for kind in A.ParseTreeType
}
_KINDS_BY_TAG.update(TAG_ALIASES)


# ═══════════════════════════════════════════════════════════════════
#  PART 2: RAW S-EXPRESSIONS (parse tree → lists and atoms)
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _Atom:
    kind: str  # "symbol", "string" or "number"
    value: Union[str, int, float]
    offset: int


@dataclass(frozen=True)
class _List:
    items: Tuple[Any, ...]
    offset: int


class _SexpBuilder(NodeVisitor):
    """Transforms the Parsimonious parse tree into ``_List``/``_Atom``."""

    unwrapped_exceptions = (TreeSyntaxError,)

    def __init__(self, filename: str) -> None:
        self._filename = filename

    def generic_visit(self, node, visited_children):
        return visited_children or node

    def visit_document(self, node, visited_children):
        _, expr, _ = visited_children
        return expr

    def visit_expr(self, node, visited_children):
        return visited_children[0]

    def visit_atom(self, node, visited_children):
        return visited_children[0]

    def visit_list(self, node, visited_children):
        _, _, items, _ = visited_children
        if isinstance(items, Node):
            # No items: the empty repetition comes back as the bare node
            items = []
        return _List(tuple(items), node.start)

    def visit_item(self, node, visited_children):
        expr, _ = visited_children
        return expr

    def visit_string(self, node, visited_children):
        try:
            value = json.loads(node.text)
        except ValueError as e:
            raise TreeSyntaxError(
                f"invalid string literal {node.text}: {e}",
                _location(node.full_text, node.start, self._filename),
            ) from None
        return _Atom("string", value, node.start)

    def visit_number(self, node, visited_children):
        text = node.text
        if any(c in text for c in ".eE"):
            value: Union[int, float] = float(text)
            if math.isinf(value):
                raise TreeSyntaxError(
                    f"number {text} is out of range",
                    _location(node.full_text, node.start, self._filename),
                )
        else:
            value = int(text)
        return _Atom("number", value, node.start)

    def visit_symbol(self, node, visited_children):
        return _Atom("symbol", node.text, node.start)


def _location(text: str, offset: int, filename: str) -> A.SourceLoc:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return A.SourceLoc(offset, line, column, filename)


# ═══════════════════════════════════════════════════════════════════
#  PART 3: TREE BUILDER (S-expressions → ParseTree)
# ═══════════════════════════════════════════════════════════════════

class _TreeBuilder:
    """Builds ``ParseTree`` nodes from raw S-expressions."""

    def __init__(self, text: str, filename: str) -> None:
        self._text = text
        self._filename = filename

    def _loc(self, offset: int) -> A.SourceLoc:
        return _location(self._text, offset, self._filename)

    def _error(self, detail: str, offset: int, code=FreeVarErrorCodes.TREE_SYNTAX):
        return TreeSyntaxError(detail, self._loc(offset), code)

    def node(self, sexp: Union[_List, _Atom]) -> A.ParseTree:
        if isinstance(sexp, _Atom):
            return self._bare_literal(sexp)

        if not sexp.items:
            raise self._error("empty list where a tree was expected", sexp.offset)
        head = sexp.items[0]
        if not isinstance(head, _Atom) or head.kind != "symbol":
            raise self._error("a tree must start with its kind", sexp.offset)
        kind = _KINDS_BY_TAG.get(head.value)
        if kind is None:
            raise self._error(
                FreeVarErrorCodes.UNKNOWN_TREE_KIND.format(name=head.value),
                head.offset,
                FreeVarErrorCodes.UNKNOWN_TREE_KIND,
            )

        cls = A.TREE_CLASSES[kind]
        args = sexp.items[1:]
        values: Dict[str, Any] = {}
        index = 0
        for f in A.tree_fields(cls):
            role = f.metadata["role"]
            if role == A.CHILDREN:
                binding = f.metadata["binding"]
                values[f.name] = tuple(
                    self._child(item, binding) for item in args[index:]
                )
                index = len(args)
                continue
            if index >= len(args):
                if f.metadata["optional"]:
                    values[f.name] = None
                    continue
                raise self._error(
                    f"({kind.tag} ...) is missing its '{f.name}'", sexp.offset
                )
            values[f.name] = self._field(kind, f, args[index])
            index += 1

        if index < len(args):
            raise self._error(
                f"too many items in ({kind.tag} ...)", _offset(args[index])
            )
        return cls(**values, loc=self._loc(sexp.offset))

    def _field(self, kind: A.ParseTreeType, f: Any, item: Union[_List, _Atom]) -> Any:
        role = f.metadata["role"]
        optional = f.metadata["optional"]
        if _is_nil(item):
            if optional:
                return None
            raise self._error(
                f"'{f.name}' of ({kind.tag} ...) cannot be nil", item.offset
            )

        if role == A.NAME:
            if isinstance(item, _Atom) and item.kind in ("symbol", "string"):
                return item.value
            raise self._error(
                f"'{f.name}' of ({kind.tag} ...) must be a symbol or string",
                _offset(item),
            )
        if role == A.VALUE:
            if isinstance(item, _List):
                raise self._error("a literal value must be an atom", item.offset)
            return self._literal_value(item)
        child = self._child(item, f.metadata["binding"])
        if f.metadata["identifier"] and not isinstance(child, A.BindingIdentifier):
            raise self._error(
                f"'{f.name}' of ({kind.tag} ...) must be a binding identifier, "
                f"found ({child.type.tag} ...)",
                _offset(item),
            )
        return child

    def _child(self, item: Union[_List, _Atom], binding: bool) -> A.ParseTree:
        if binding and isinstance(item, _Atom) and item.kind == "symbol":
            return A.BindingIdentifier(item.value, loc=self._loc(item.offset))
        return self.node(item)

    def _bare_literal(self, atom: _Atom) -> A.Literal:
        return A.Literal(self._literal_value(atom), loc=self._loc(atom.offset))

    def _literal_value(self, atom: _Atom) -> A.LiteralValue:
        if atom.kind != "symbol":
            return atom.value
        if atom.value in _KEYWORD_LITERALS:
            return _KEYWORD_LITERALS[atom.value]
        raise self._error(
            f"expected a tree, found '{atom.value}' "
            f"(write (id {atom.value}) for an identifier)",
            atom.offset,
        )


def _is_nil(item: Union[_List, _Atom]) -> bool:
    return isinstance(item, _Atom) and item.kind == "symbol" and item.value == NIL


def _offset(item: Union[_List, _Atom]) -> int:
    return item.offset


# ═══════════════════════════════════════════════════════════════════
#  PART 4: PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def read_tree(text: str, filename: str = "<string>") -> A.ParseTree:
    """Parse one tree from S-expression *text*.

    Raises:
        TreeSyntaxError: If *text* is not a well-formed tree dump
    """
    try:
        raw = SEXP_GRAMMAR.parse(text)
    except ParseError as e:
        if e.pos >= len(text):
            detail = "unexpected end of input"
        else:
            detail = f"unexpected input {text[e.pos:e.pos + 20]!r}"
        raise TreeSyntaxError(detail, _location(text, e.pos, filename)) from None

    sexp = _SexpBuilder(filename).visit(raw)
    tree = _TreeBuilder(text, filename).node(sexp)
    logger.debug("Read %s tree from %s", tree.type.tag, filename)
    return tree


def read_tree_file(path: Union[str, Path]) -> A.ParseTree:
    """Read a tree dump from *path*; locations carry the path as file name."""
    p = Path(path)
    return read_tree(p.read_text(encoding="utf-8"), str(p))


# ─────────────────────────────────────────────────────────────────────
# Writer
# ─────────────────────────────────────────────────────────────────────

_WIDTH = 78


def write_tree(tree: A.ParseTree) -> str:
    """Render *tree* in the notation ``read_tree`` accepts.

    Locations are not written.  Reading the result back gives a tree equal
    to *tree*.

    Raises:
        ValueError: If a literal is an infinite or NaN number, which the
            notation cannot spell
    """
    return _render(tree, 0)


def _render(tree: A.ParseTree, indent: int) -> str:
    if isinstance(tree, A.Literal):
        return _literal(tree.value)

    items: List[str] = []
    for f in A.tree_fields(type(tree)):
        role = f.metadata["role"]
        value = getattr(tree, f.name)
        if role == A.CHILDREN:
            binding = f.metadata["binding"]
            items.extend(_item(child, binding, indent + 2) for child in value)
        elif value is None:
            items.append(NIL)
        elif role == A.NAME:
            items.append(_name(value))
        else:
            items.append(_item(value, f.metadata["binding"], indent + 2))

    head = tree.type.tag
    flat = "(" + " ".join([head, *items]) + ")"
    if indent + len(flat) <= _WIDTH and "\n" not in flat:
        return flat
    pad = "\n" + " " * (indent + 2)
    return "(" + head + "".join(pad + item for item in items) + ")"


def _item(tree: A.ParseTree, binding: bool, indent: int) -> str:
    if binding and isinstance(tree, A.BindingIdentifier):
        name = _name(tree.name)
        if not name.startswith("\""):
            return name
    return _render(tree, indent)


def _name(name: str) -> str:
    if (
        name != NIL
        and _SYMBOL_RE.fullmatch(name)
        and not _NUMBER_RE.fullmatch(name)
    ):
        return name
    return json.dumps(name, ensure_ascii=False)


def _literal(value: A.LiteralValue) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"cannot write non-finite number {value!r}")
    return repr(value)
