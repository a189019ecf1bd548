"""
Abstract Syntax Tree node definitions for Lox.

Expressions and statements are two closed families of immutable nodes.
Each node class carries an ``ASTNodeType`` tag, and consumers dispatch on
that tag through ``ASTVisitor``, which refuses to define a visitor that
does not handle every node type.

Author: xwest
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from ..lexer.tokens import Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Expressions
    ASSIGN = "assign"
    BINARY = "binary"
    CALL = "call"
    GET = "get"
    GROUPING = "grouping"
    LITERAL = "literal"
    LOGICAL = "logical"
    SET = "set"
    SUPER = "super"
    THIS = "this"
    UNARY = "unary"
    VARIABLE = "variable"

    # Statements
    BLOCK = "block"
    FUNCTION = "function"
    EXPRESSION = "expression"
    CLASS = "class"
    IF = "if"
    PRINT = "print"
    RETURN = "return"
    VAR = "var"
    WHILE = "while"


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    node_type: ClassVar[ASTNodeType]

    def children(self) -> List["ASTNode"]:
        """Get all direct child nodes, in source order."""
        result = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                result.append(value)
            elif isinstance(value, tuple):
                result.extend(item for item in value if isinstance(item, ASTNode))
        return result

    @property
    def kind(self) -> str:
        return self.node_type.value

    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Assignment(ASTNode):
    """Assignment to a variable: ``name = value``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.ASSIGN
    name: Token
    value: "Expr"


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """Arithmetic, comparison or equality operation."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BINARY
    left: "Expr"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """Call expression. ``paren`` is the closing parenthesis."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.CALL
    callee: "Expr"
    paren: Token
    arguments: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class FieldAccess(ASTNode):
    """Property read: ``object.name``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.GET
    object: "Expr"
    name: Token


@dataclass(frozen=True)
class Grouping(ASTNode):
    """Parenthesized expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.GROUPING
    expression: "Expr"


@dataclass(frozen=True, eq=False)
class Literal(ASTNode):
    """
    Literal value: a float, a str, a bool, or None for ``nil``.

    Equality also compares the Python type of the value, so that ``true``
    and ``1`` are different literals.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LITERAL
    value: Union[float, str, bool, None]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class LogicalOp(ASTNode):
    """Short-circuiting ``and`` / ``or``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.LOGICAL
    left: "Expr"
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class FieldAssignment(ASTNode):
    """Property write: ``object.name = value``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.SET
    object: "Expr"
    name: Token
    value: "Expr"


@dataclass(frozen=True)
class SuperAccess(ASTNode):
    """Superclass method lookup: ``super.method``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.SUPER
    keyword: Token
    method: Token


@dataclass(frozen=True)
class ThisExpr(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.THIS
    keyword: Token


@dataclass(frozen=True)
class UnaryOp(ASTNode):
    """Prefix ``!`` or ``-``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.UNARY
    operator: Token
    right: "Expr"


@dataclass(frozen=True)
class Variable(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VARIABLE
    name: Token


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class BlockStatement(ASTNode):
    """Block statement containing multiple statements."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BLOCK
    statements: Tuple["Stmt", ...] = ()


@dataclass(frozen=True)
class FunctionDef(ASTNode):
    """
    Function or method definition.

    ``body`` is None only for a forward declaration; the parser always
    fills it in.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION
    name: Token
    params: Tuple[Token, ...] = ()
    body: Optional[Tuple["Stmt", ...]] = None


@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.EXPRESSION
    expression: "Expr"


@dataclass(frozen=True)
class ClassDef(ASTNode):
    """Class declaration with an optional superclass."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.CLASS
    name: Token
    superclass: Optional[Variable] = None
    methods: Tuple[FunctionDef, ...] = ()


@dataclass(frozen=True)
class IfStatement(ASTNode):
    """If statement with optional else clause."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.IF
    condition: "Expr"
    then_branch: "Stmt"
    else_branch: Optional["Stmt"] = None


@dataclass(frozen=True)
class PrintStatement(ASTNode):
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PRINT
    expression: "Expr"


@dataclass(frozen=True)
class ReturnStatement(ASTNode):
    """Return statement. ``keyword`` is kept for diagnostics."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.RETURN
    keyword: Token
    value: Optional["Expr"] = None


@dataclass(frozen=True)
class VariableDecl(ASTNode):
    """Variable declaration statement."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VAR
    name: Token
    initializer: Optional["Expr"] = None


@dataclass(frozen=True)
class WhileLoop(ASTNode):
    """While loop statement. ``for`` loops are desugared into these."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.WHILE
    condition: "Expr"
    body: "Stmt"


Expr = Union[
    Assignment, BinaryOp, FunctionCall, FieldAccess, Grouping, Literal,
    LogicalOp, FieldAssignment, SuperAccess, ThisExpr, UnaryOp, Variable,
]

Stmt = Union[
    BlockStatement, FunctionDef, ExpressionStatement, ClassDef, IfStatement,
    PrintStatement, ReturnStatement, VariableDecl, WhileLoop,
]

EXPRESSION_TYPES = frozenset({
    ASTNodeType.ASSIGN, ASTNodeType.BINARY, ASTNodeType.CALL, ASTNodeType.GET,
    ASTNodeType.GROUPING, ASTNodeType.LITERAL, ASTNodeType.LOGICAL,
    ASTNodeType.SET, ASTNodeType.SUPER, ASTNodeType.THIS, ASTNodeType.UNARY,
    ASTNodeType.VARIABLE,
})

STATEMENT_TYPES = frozenset(ASTNodeType) - EXPRESSION_TYPES


class ASTVisitor:
    """
    Visitor over the closed set of AST node types.

    ``visit`` dispatches on ``node.node_type`` to ``visit_<kind>``. Every
    concrete subclass must handle every node type; a missing handler is a
    TypeError when the subclass is defined, not when the node is first met.
    Pass ``abstract=True`` in the class statement to skip the check for an
    intermediate base class.
    """

    _dispatch: ClassVar[Dict[ASTNodeType, str]] = {}

    def __init_subclass__(cls, abstract: bool = False, **kwargs):
        super().__init_subclass__(**kwargs)
        if abstract:
            return

        missing = [
            f"visit_{node_type.value}" for node_type in ASTNodeType
            if not callable(getattr(cls, f"visit_{node_type.value}", None))
        ]
        if missing:
            raise TypeError(
                f"{cls.__name__} does not handle every AST node type; "
                f"missing: {', '.join(missing)}"
            )

        cls._dispatch = {
            node_type: f"visit_{node_type.value}" for node_type in ASTNodeType
        }

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching on its type tag."""
        try:
            method_name = self._dispatch[node.node_type]
        except (KeyError, AttributeError):
            raise TypeError(f"Not an AST node: {node!r}") from None
        return getattr(self, method_name)(node)


def dump(node: Any, include_lines: bool = False) -> str:
    """
    Render a node (or a sequence of nodes) as a compact structural string.

    Tokens are shown as their lexemes; with ``include_lines`` their source
    line is appended. Two trees that differ only in token line numbers dump
    to the same string without ``include_lines``.
    """
    if isinstance(node, ASTNode):
        parts = [
            f"{f.name}={dump(getattr(node, f.name), include_lines)}"
            for f in fields(node)
        ]
        return f"{type(node).__name__}({', '.join(parts)})"

    if isinstance(node, Token):
        if include_lines and node.line is not None:
            return f"{node.lexeme!r}@{node.line}"
        return repr(node.lexeme)

    if isinstance(node, (tuple, list)):
        return "[" + ", ".join(dump(item, include_lines) for item in node) + "]"

    return repr(node)
