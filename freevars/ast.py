"""freevars/ast.py – Parse tree definitions for lowered JavaScript programs.

The free variable checker runs at the very end of the compiler pipeline,
after module imports, block scoping (``let`` / ``const``) and classes have
been rewritten into plain functions and ``var`` bindings.  This module
defines the tree the checker consumes: only the constructs that survive
those lowering passes are represented.

Design invariants
-----------------
* Every tree node is a frozen dataclass (immutable after construction).
* Children that form a sequence are stored as tuples, never lists.
* Every node carries an optional ``loc`` (``SourceLoc``).  Nodes synthesised
  by the compiler have ``loc=None``; locations never take part in equality.
* The construct kind of a node is ``node.type``, a member of the closed
  ``ParseTreeType`` enumeration.  Visitor method names and the S-expression
  tags used by :mod:`freevars.sexp` are both derived from it.
* Property names, member names, labels and operators are plain strings.
  Only ``IdentifierExpression`` and ``BindingIdentifier`` name variables.

Style conventions
-----------------
* ``from __future__ import annotations`` for PEP 604 unions.
* ``@dataclass(frozen=True, slots=True)`` for every node.
* Field roles (name / child / children) are recorded in the dataclass field
  metadata so that generic code can walk or rebuild any node.

Module layout
-------------
§1  Source location
§2  Tree kinds & base class
§3  Functions, parameters & patterns
§4  Statements
§5  Expressions
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterator,
    Optional,
    Tuple,
    Type,
    Union,
)

# ════════════════════════════════════════════════════════════════════════
# §1  Source location
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True, order=True)
class SourceLoc:
    """A position in a source file.

    Locations order by absolute ``offset`` first, which is the order in
    which diagnostics are issued.  ``line`` and ``column`` are 1-based and
    only used for display.
    """

    offset: int
    line: int = 0
    column: int = 0
    file: str = "<unknown>"

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


# ════════════════════════════════════════════════════════════════════════
# §2  Tree kinds & base class
# ════════════════════════════════════════════════════════════════════════


class ParseTreeType(Enum):
    """Closed set of construct kinds understood by the checker."""

    PROGRAM = auto()

    # Functions, parameters & patterns
    FUNCTION_DECLARATION = auto()
    FUNCTION_EXPRESSION = auto()
    ARROW_FUNCTION_EXPRESSION = auto()
    PROPERTY_METHOD_ASSIGNMENT = auto()
    GET_ACCESSOR = auto()
    SET_ACCESSOR = auto()
    FORMAL_PARAMETER_LIST = auto()
    REST_PARAMETER = auto()
    FUNCTION_BODY = auto()
    BINDING_IDENTIFIER = auto()
    BINDING_ELEMENT = auto()
    OBJECT_PATTERN = auto()
    OBJECT_PATTERN_FIELD = auto()
    ARRAY_PATTERN = auto()

    # Statements
    VARIABLE_STATEMENT = auto()
    VARIABLE_DECLARATION = auto()
    BLOCK = auto()
    EMPTY_STATEMENT = auto()
    EXPRESSION_STATEMENT = auto()
    RETURN_STATEMENT = auto()
    IF_STATEMENT = auto()
    WHILE_STATEMENT = auto()
    DO_WHILE_STATEMENT = auto()
    FOR_STATEMENT = auto()
    FOR_IN_STATEMENT = auto()
    BREAK_STATEMENT = auto()
    CONTINUE_STATEMENT = auto()
    LABELLED_STATEMENT = auto()
    THROW_STATEMENT = auto()
    TRY_STATEMENT = auto()
    CATCH = auto()
    FINALLY = auto()
    SWITCH_STATEMENT = auto()
    CASE_CLAUSE = auto()
    DEFAULT_CLAUSE = auto()
    DEBUGGER_STATEMENT = auto()

    # Expressions
    IDENTIFIER_EXPRESSION = auto()
    THIS_EXPRESSION = auto()
    LITERAL = auto()
    ARRAY_LITERAL = auto()
    OBJECT_LITERAL = auto()
    PROPERTY_NAME_ASSIGNMENT = auto()
    UNARY_EXPRESSION = auto()
    POSTFIX_EXPRESSION = auto()
    BINARY_EXPRESSION = auto()
    CONDITIONAL_EXPRESSION = auto()
    CALL_EXPRESSION = auto()
    NEW_EXPRESSION = auto()
    MEMBER_EXPRESSION = auto()
    MEMBER_LOOKUP_EXPRESSION = auto()
    COMMA_EXPRESSION = auto()
    SPREAD_EXPRESSION = auto()

    @property
    def visit_method(self) -> str:
        """Name of the visitor method handling this kind."""
        return "visit_" + self.name.lower()

    @property
    def tag(self) -> str:
        """S-expression tag, e.g. ``function-declaration``."""
        return self.name.lower().replace("_", "-")


# Field roles, stored in dataclass field metadata.  A child field marked
# ``binding`` sits in binding position, so readers may spell a
# ``BindingIdentifier`` there as a bare name.
NAME = "name"
CHILD = "child"
CHILDREN = "children"
VALUE = "value"


def _name(optional: bool = False) -> Any:
    return field(metadata={"role": NAME, "optional": optional})


def _child(
    optional: bool = False, binding: bool = False, identifier: bool = False
) -> Any:
    # identifier: the binding must be a plain name, never a pattern
    return field(metadata={
        "role": CHILD, "optional": optional, "binding": binding,
        "identifier": identifier,
    })


def _children(binding: bool = False) -> Any:
    return field(metadata={
        "role": CHILDREN, "optional": False, "binding": binding,
        "identifier": False,
    })


def _loc() -> Any:
    return field(default=None, kw_only=True, compare=False, repr=False)


class ParseTree:
    """Base class of every tree node."""

    __slots__ = ()

    type: ClassVar[ParseTreeType]

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_<kind>``, or ``generic_visit``."""
        method = getattr(visitor, self.type.visit_method, None)
        if method is None:
            method = visitor.generic_visit
        return method(self)

    def children(self) -> Iterator[ParseTree]:
        """Yield the child nodes in source order."""
        for f in tree_fields(type(self)):
            role = f.metadata["role"]
            value = getattr(self, f.name)
            if role == CHILD:
                if value is not None:
                    yield value
            elif role == CHILDREN:
                yield from value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        result: Dict[str, Any] = {"type": self.type.name}
        for f in tree_fields(type(self)):
            role = f.metadata["role"]
            value = getattr(self, f.name)
            if role == CHILD:
                result[f.name] = value.to_dict() if value is not None else None
            elif role == CHILDREN:
                result[f.name] = [child.to_dict() for child in value]
            else:
                result[f.name] = value
        loc = getattr(self, "loc", None)
        if loc is not None:
            result["loc"] = {
                "file": loc.file,
                "offset": loc.offset,
                "line": loc.line,
                "column": loc.column,
            }
        return result


@functools.lru_cache(maxsize=None)
def tree_fields(cls: Type[ParseTree]) -> Tuple[Any, ...]:
    """The structural fields of *cls* (everything except ``loc``)."""
    return tuple(f for f in fields(cls) if "role" in f.metadata)


# ════════════════════════════════════════════════════════════════════════
# §3  Functions, parameters & patterns
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Program(ParseTree):
    """Root of a compilation unit."""

    type: ClassVar[ParseTreeType] = ParseTreeType.PROGRAM

    elements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class BindingIdentifier(ParseTree):
    """A name being bound: variable declarator, parameter, catch binding,
    function name, or a leaf of a destructuring pattern."""

    type: ClassVar[ParseTreeType] = ParseTreeType.BINDING_IDENTIFIER

    name: str = _name()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class BindingElement(ParseTree):
    """A binding target with an optional default: ``x = 1`` in a parameter
    list or destructuring pattern."""

    type: ClassVar[ParseTreeType] = ParseTreeType.BINDING_ELEMENT

    binding: ParseTree = _child(binding=True)
    initializer: Optional[ParseTree] = _child(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ObjectPattern(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.OBJECT_PATTERN

    fields: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ObjectPatternField(ParseTree):
    """``name: element`` inside an object pattern.  ``name`` is a property
    name, not a binding."""

    type: ClassVar[ParseTreeType] = ParseTreeType.OBJECT_PATTERN_FIELD

    name: str = _name()
    element: ParseTree = _child(binding=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ArrayPattern(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.ARRAY_PATTERN

    elements: Tuple[ParseTree, ...] = _children(binding=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class RestParameter(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.REST_PARAMETER

    identifier: BindingIdentifier = _child(binding=True, identifier=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class FormalParameterList(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.FORMAL_PARAMETER_LIST

    parameters: Tuple[ParseTree, ...] = _children(binding=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class FunctionBody(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.FUNCTION_BODY

    statements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class FunctionDeclaration(ParseTree):
    """``function name(params) { body }`` in statement position.

    The name is bound in the enclosing scope, not inside the function.
    """

    type: ClassVar[ParseTreeType] = ParseTreeType.FUNCTION_DECLARATION

    name: BindingIdentifier = _child(binding=True, identifier=True)
    parameters: FormalParameterList = _child()
    body: FunctionBody = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class FunctionExpression(ParseTree):
    """``function name?(params) { body }`` in expression position.

    A present name is visible only inside the function itself.
    """

    type: ClassVar[ParseTreeType] = ParseTreeType.FUNCTION_EXPRESSION

    name: Optional[BindingIdentifier] = _child(
        optional=True, binding=True, identifier=True
    )
    parameters: FormalParameterList = _child()
    body: FunctionBody = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ArrowFunctionExpression(ParseTree):
    """``(params) => body``.  ``body`` is a ``FunctionBody`` or a bare
    expression."""

    type: ClassVar[ParseTreeType] = ParseTreeType.ARROW_FUNCTION_EXPRESSION

    parameters: FormalParameterList = _child()
    body: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class PropertyMethodAssignment(ParseTree):
    """Object literal method ``name(params) { body }``."""

    type: ClassVar[ParseTreeType] = ParseTreeType.PROPERTY_METHOD_ASSIGNMENT

    name: str = _name()
    parameters: FormalParameterList = _child()
    body: FunctionBody = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class GetAccessor(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.GET_ACCESSOR

    name: str = _name()
    body: FunctionBody = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class SetAccessor(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.SET_ACCESSOR

    name: str = _name()
    parameter: ParseTree = _child(binding=True)
    body: FunctionBody = _child()
    loc: Optional[SourceLoc] = _loc()


# ════════════════════════════════════════════════════════════════════════
# §4  Statements
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariableDeclaration(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.VARIABLE_DECLARATION

    binding: ParseTree = _child(binding=True)
    initializer: Optional[ParseTree] = _child(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class VariableStatement(ParseTree):
    """``var a = 1, b;``"""

    type: ClassVar[ParseTreeType] = ParseTreeType.VARIABLE_STATEMENT

    declarations: Tuple[VariableDeclaration, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class Block(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.BLOCK

    statements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class EmptyStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.EMPTY_STATEMENT

    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class DebuggerStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.DEBUGGER_STATEMENT

    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ExpressionStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.EXPRESSION_STATEMENT

    expression: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ReturnStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.RETURN_STATEMENT

    expression: Optional[ParseTree] = _child(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class IfStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.IF_STATEMENT

    condition: ParseTree = _child()
    if_clause: ParseTree = _child()
    else_clause: Optional[ParseTree] = _child(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class WhileStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.WHILE_STATEMENT

    condition: ParseTree = _child()
    body: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class DoWhileStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.DO_WHILE_STATEMENT

    body: ParseTree = _child()
    condition: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ForStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.FOR_STATEMENT

    initializer: Optional[ParseTree] = _child(optional=True)
    condition: Optional[ParseTree] = _child(optional=True)
    increment: Optional[ParseTree] = _child(optional=True)
    body: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ForInStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.FOR_IN_STATEMENT

    initializer: ParseTree = _child()
    collection: ParseTree = _child()
    body: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class BreakStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.BREAK_STATEMENT

    label: Optional[str] = _name(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ContinueStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.CONTINUE_STATEMENT

    label: Optional[str] = _name(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class LabelledStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.LABELLED_STATEMENT

    label: str = _name()
    statement: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ThrowStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.THROW_STATEMENT

    value: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class Catch(ParseTree):
    """``catch (binding) { body }``"""

    type: ClassVar[ParseTreeType] = ParseTreeType.CATCH

    binding: ParseTree = _child(binding=True)
    catch_body: Block = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class Finally(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.FINALLY

    block: Block = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class TryStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.TRY_STATEMENT

    body: Block = _child()
    catch_block: Optional[Catch] = _child(optional=True)
    finally_block: Optional[Finally] = _child(optional=True)
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class CaseClause(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.CASE_CLAUSE

    expression: ParseTree = _child()
    statements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class DefaultClause(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.DEFAULT_CLAUSE

    statements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class SwitchStatement(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.SWITCH_STATEMENT

    expression: ParseTree = _child()
    clauses: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


# ════════════════════════════════════════════════════════════════════════
# §5  Expressions
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class IdentifierExpression(ParseTree):
    """A use of a variable."""

    type: ClassVar[ParseTreeType] = ParseTreeType.IDENTIFIER_EXPRESSION

    name: str = _name()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ThisExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.THIS_EXPRESSION

    loc: Optional[SourceLoc] = _loc()


#: Values a literal can hold (``None`` is JavaScript ``null``).
LiteralValue = Union[str, int, float, bool, None]


@dataclass(frozen=True, slots=True)
class Literal(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.LITERAL

    value: LiteralValue = field(metadata={"role": VALUE, "optional": True})
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ArrayLiteral(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.ARRAY_LITERAL

    elements: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class PropertyNameAssignment(ParseTree):
    """``name: value`` inside an object literal."""

    type: ClassVar[ParseTreeType] = ParseTreeType.PROPERTY_NAME_ASSIGNMENT

    name: str = _name()
    value: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ObjectLiteral(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.OBJECT_LITERAL

    properties: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class UnaryExpression(ParseTree):
    """Prefix operator: ``typeof x``, ``!x``, ``-x``, ``++x``, ``delete x``."""

    type: ClassVar[ParseTreeType] = ParseTreeType.UNARY_EXPRESSION

    operator: str = _name()
    operand: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class PostfixExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.POSTFIX_EXPRESSION

    operator: str = _name()
    operand: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class BinaryExpression(ParseTree):
    """Binary operator, including assignment operators."""

    type: ClassVar[ParseTreeType] = ParseTreeType.BINARY_EXPRESSION

    operator: str = _name()
    left: ParseTree = _child()
    right: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class ConditionalExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.CONDITIONAL_EXPRESSION

    condition: ParseTree = _child()
    left: ParseTree = _child()
    right: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class CallExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.CALL_EXPRESSION

    operand: ParseTree = _child()
    arguments: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class NewExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.NEW_EXPRESSION

    operand: ParseTree = _child()
    arguments: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class MemberExpression(ParseTree):
    """``operand.member_name``"""

    type: ClassVar[ParseTreeType] = ParseTreeType.MEMBER_EXPRESSION

    operand: ParseTree = _child()
    member_name: str = _name()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class MemberLookupExpression(ParseTree):
    """``operand[member_expression]``"""

    type: ClassVar[ParseTreeType] = ParseTreeType.MEMBER_LOOKUP_EXPRESSION

    operand: ParseTree = _child()
    member_expression: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class CommaExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.COMMA_EXPRESSION

    expressions: Tuple[ParseTree, ...] = _children()
    loc: Optional[SourceLoc] = _loc()


@dataclass(frozen=True, slots=True)
class SpreadExpression(ParseTree):
    type: ClassVar[ParseTreeType] = ParseTreeType.SPREAD_EXPRESSION

    expression: ParseTree = _child()
    loc: Optional[SourceLoc] = _loc()


#: ``ParseTreeType`` → node class, used by readers that build trees by kind.
TREE_CLASSES: Dict[ParseTreeType, Type[ParseTree]] = {
    cls.type: cls
    for cls in (
        Program,
        FunctionDeclaration,
        FunctionExpression,
        ArrowFunctionExpression,
        PropertyMethodAssignment,
        GetAccessor,
        SetAccessor,
        FormalParameterList,
        RestParameter,
        FunctionBody,
        BindingIdentifier,
        BindingElement,
        ObjectPattern,
        ObjectPatternField,
        ArrayPattern,
        VariableStatement,
        VariableDeclaration,
        Block,
        EmptyStatement,
        ExpressionStatement,
        ReturnStatement,
        IfStatement,
        WhileStatement,
        DoWhileStatement,
        ForStatement,
        ForInStatement,
        BreakStatement,
        ContinueStatement,
        LabelledStatement,
        ThrowStatement,
        TryStatement,
        Catch,
        Finally,
        SwitchStatement,
        CaseClause,
        DefaultClause,
        DebuggerStatement,
        IdentifierExpression,
        ThisExpression,
        Literal,
        ArrayLiteral,
        ObjectLiteral,
        PropertyNameAssignment,
        UnaryExpression,
        PostfixExpression,
        BinaryExpression,
        ConditionalExpression,
        CallExpression,
        NewExpression,
        MemberExpression,
        MemberLookupExpression,
        CommaExpression,
        SpreadExpression,
    )
}
