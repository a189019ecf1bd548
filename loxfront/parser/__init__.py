"""
Lox Parser Package

Implements a recursive descent parser for the Lox language.
Produces immutable Abstract Syntax Trees, one top-level declaration at a time.

Key Features:
- Unambiguous precedence grammar with one token of lookahead
- Closed families of frozen AST nodes with an exhaustive visitor
- Per-declaration error recovery that keeps the rest of the file useful
- Source printer that round-trips parsed programs

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse, parse_string
from .printer import AstPrinter, print_program
from .token_stream import TokenStream
from .errors import ParseError, ParseResult

__all__ = [
    # Core parser
    "Parser", "parse", "parse_string", "TokenStream",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "Expr", "Stmt", "dump",
    "Assignment", "BinaryOp", "FunctionCall", "FieldAccess", "Grouping",
    "Literal", "LogicalOp", "FieldAssignment", "SuperAccess", "ThisExpr",
    "UnaryOp", "Variable",
    "BlockStatement", "FunctionDef", "ExpressionStatement", "ClassDef",
    "IfStatement", "PrintStatement", "ReturnStatement", "VariableDecl",
    "WhileLoop",

    # Printing
    "AstPrinter", "print_program",

    # Error handling
    "ParseError", "ParseResult",
]
