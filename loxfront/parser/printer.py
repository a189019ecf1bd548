"""
Lox source printer.

Re-serializes AST nodes to source text that parses back to the same tree.
Parentheses are only emitted where the tree holds a Grouping node; the
parser already encodes precedence in the shape of the tree.

Author: xwest
"""

import math
from decimal import Decimal
from typing import Iterable, List

from .ast_nodes import (
    ASTVisitor, ASTNode, EXPRESSION_TYPES, Assignment, BinaryOp, FunctionCall,
    FieldAccess, Grouping, Literal, LogicalOp, FieldAssignment, SuperAccess,
    ThisExpr, UnaryOp, Variable, BlockStatement, FunctionDef,
    ExpressionStatement, ClassDef, IfStatement, PrintStatement,
    ReturnStatement, VariableDecl, WhileLoop,
)


def format_number(value: float) -> str:
    """Format a number literal the way it could be written in source."""
    if math.isinf(value):
        # Literals too large for a float scan to inf; this overflows the same way
        return "1" + "0" * 309
    if value.is_integer():
        return str(int(value))
    # Avoid exponent notation, which the scanner does not accept
    return format(Decimal(repr(value)), "f")


class AstPrinter(ASTVisitor):
    """
    Turns statements and expressions back into Lox source.

    Expression visitors return a string; statement visitors return a list
    of lines, indented with ``indent`` per block level.
    """

    def __init__(self, indent: str = "    "):
        self.indent = indent

    def print_program(self, statements: Iterable[ASTNode]) -> str:
        """Print a sequence of top-level statements as a source file."""
        lines: List[str] = []
        for stmt in statements:
            lines.extend(self.visit(stmt))
        return "\n".join(lines) + "\n" if lines else ""

    def print_stmt(self, stmt: ASTNode) -> str:
        return "\n".join(self.visit(stmt))

    def print_expr(self, expr: ASTNode) -> str:
        return self.visit(expr)

    def print(self, node: ASTNode) -> str:
        if node.node_type in EXPRESSION_TYPES:
            return self.print_expr(node)
        return self.print_stmt(node)

    def _indented(self, lines: List[str]) -> List[str]:
        return [self.indent + line for line in lines]

    def _body(self, statements) -> List[str]:
        lines = ["{"]
        for stmt in statements:
            lines.extend(self._indented(self.visit(stmt)))
        lines.append("}")
        return lines

    def _nested(self, header: str, stmt: ASTNode) -> List[str]:
        """Attach a statement to a header line such as ``while (x)``."""
        lines = self.visit(stmt)
        if isinstance(stmt, BlockStatement):
            return [f"{header} {lines[0]}"] + lines[1:]
        return [header] + self._indented(lines)

    # ========================================================================
    # Expressions
    # ========================================================================

    def visit_assign(self, node: Assignment) -> str:
        return f"{node.name.lexeme} = {self.visit(node.value)}"

    def visit_binary(self, node: BinaryOp) -> str:
        return f"{self.visit(node.left)} {node.operator.lexeme} {self.visit(node.right)}"

    def visit_call(self, node: FunctionCall) -> str:
        arguments = ", ".join(self.visit(arg) for arg in node.arguments)
        return f"{self.visit(node.callee)}({arguments})"

    def visit_get(self, node: FieldAccess) -> str:
        return f"{self.visit(node.object)}.{node.name.lexeme}"

    def visit_grouping(self, node: Grouping) -> str:
        return f"({self.visit(node.expression)})"

    def visit_literal(self, node: Literal) -> str:
        value = node.value
        if value is None:
            return "nil"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, str):
            return f'"{value}"'
        return format_number(value)

    def visit_logical(self, node: LogicalOp) -> str:
        return f"{self.visit(node.left)} {node.operator.lexeme} {self.visit(node.right)}"

    def visit_set(self, node: FieldAssignment) -> str:
        return f"{self.visit(node.object)}.{node.name.lexeme} = {self.visit(node.value)}"

    def visit_super(self, node: SuperAccess) -> str:
        return f"super.{node.method.lexeme}"

    def visit_this(self, node: ThisExpr) -> str:
        return "this"

    def visit_unary(self, node: UnaryOp) -> str:
        return f"{node.operator.lexeme}{self.visit(node.right)}"

    def visit_variable(self, node: Variable) -> str:
        return node.name.lexeme

    # ========================================================================
    # Statements
    # ========================================================================

    def visit_block(self, node: BlockStatement) -> List[str]:
        return self._body(node.statements)

    def visit_function(self, node: FunctionDef, keyword: str = "fun ") -> List[str]:
        params = ", ".join(param.lexeme for param in node.params)
        lines = self._body(node.body or ())
        lines[0] = f"{keyword}{node.name.lexeme}({params}) {lines[0]}"
        return lines

    def visit_expression(self, node: ExpressionStatement) -> List[str]:
        return [f"{self.visit(node.expression)};"]

    def visit_class(self, node: ClassDef) -> List[str]:
        header = f"class {node.name.lexeme}"
        if node.superclass is not None:
            header += f" < {node.superclass.name.lexeme}"

        lines = [header + " {"]
        for method in node.methods:
            lines.extend(self._indented(self.visit_function(method, keyword="")))
        lines.append("}")
        return lines

    def visit_if(self, node: IfStatement) -> List[str]:
        lines = self._nested(f"if ({self.visit(node.condition)})", node.then_branch)
        if node.else_branch is not None:
            else_lines = self._nested("else", node.else_branch)
            if isinstance(node.then_branch, BlockStatement):
                lines[-1] = f"{lines[-1]} {else_lines[0]}"
                lines.extend(else_lines[1:])
            else:
                lines.extend(else_lines)
        return lines

    def visit_print(self, node: PrintStatement) -> List[str]:
        return [f"print {self.visit(node.expression)};"]

    def visit_return(self, node: ReturnStatement) -> List[str]:
        if node.value is None:
            return ["return;"]
        return [f"return {self.visit(node.value)};"]

    def visit_var(self, node: VariableDecl) -> List[str]:
        if node.initializer is None:
            return [f"var {node.name.lexeme};"]
        return [f"var {node.name.lexeme} = {self.visit(node.initializer)};"]

    def visit_while(self, node: WhileLoop) -> List[str]:
        return self._nested(f"while ({self.visit(node.condition)})", node.body)


def print_program(statements: Iterable[ASTNode], indent: str = "    ") -> str:
    """Convenience function to print top-level statements as source text."""
    return AstPrinter(indent).print_program(statements)
