"""
Lox Recursive Descent Parser

Turns the scanner's token sequence into top-level declarations, one at a
time. Each grammar rule is a method; expression methods follow precedence
from lowest (assignment) to highest (primary).

A syntax error inside a top-level declaration discards that declaration:
the error is logged and kept in ``Parser.errors``, the parser skips ahead
to the next likely declaration, and parsing carries on. Lexical errors are
never caught here.
Nesting deeper than the parser's ``max_depth`` is reported the same way.

    program        → declaration* EOF ;
    declaration    → classDecl | funDecl | varDecl | statement ;
    classDecl      → "class" IDENTIFIER ( "<" IDENTIFIER )? "{" function* "}" ;
    funDecl        → "fun" function ;
    varDecl        → "var" IDENTIFIER ( "=" expression )? ";" ;
    statement      → exprStmt | forStmt | ifStmt | printStmt | returnStmt
                   | whileStmt | block ;
    forStmt        → "for" "(" ( varDecl | exprStmt | ";" ) expression? ";"
                     expression? ")" statement ;
    ifStmt         → "if" "(" expression ")" statement ( "else" statement )? ;
    block          → "{" declaration* "}" ;
    assignment     → ( call "." )? IDENTIFIER "=" assignment | logic_or ;
    logic_or       → logic_and ( "or" logic_and )* ;
    logic_and      → equality ( "and" equality )* ;
    equality       → comparison ( ( "!=" | "==" ) comparison )* ;
    comparison     → term ( ( ">" | ">=" | "<" | "<=" ) term )* ;
    term           → factor ( ( "-" | "+" ) factor )* ;
    factor         → unary ( ( "/" | "*" ) unary )* ;
    unary          → ( "!" | "-" ) unary | call ;
    call           → primary ( "(" arguments? ")" | "." IDENTIFIER )* ;
    primary        → "true" | "false" | "nil" | "this" | NUMBER | STRING
                   | IDENTIFIER | "(" expression ")" | "super" "." IDENTIFIER ;
    function       → IDENTIFIER "(" parameters? ")" block ;

Author: xwest
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from ..lexer.tokens import Token, TokenType
from ..lexer.scanner import scan
from .ast_nodes import (
    Expr, Stmt, Assignment, BinaryOp, FunctionCall, FieldAccess, Grouping,
    Literal, LogicalOp, FieldAssignment, SuperAccess, ThisExpr, UnaryOp,
    Variable, BlockStatement, FunctionDef, ExpressionStatement, ClassDef,
    IfStatement, PrintStatement, ReturnStatement, VariableDecl, WhileLoop,
)
from .errors import (
    ParseError, ParseResult, create_expected_expression_error,
    create_invalid_assignment_error, create_nesting_too_deep_error
)
from .token_stream import TokenStream

logger = logging.getLogger(__name__)

# Tokens that begin a declaration; error recovery resumes in front of them
DECLARATION_STARTERS = frozenset({
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
})

EQUALITY_OPERATORS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON_OPERATORS = (
    TokenType.GREATER, TokenType.GREATER_EQUAL,
    TokenType.LESS, TokenType.LESS_EQUAL,
)
TERM_OPERATORS = (TokenType.MINUS, TokenType.PLUS)
FACTOR_OPERATORS = (TokenType.SLASH, TokenType.STAR)
UNARY_OPERATORS = (TokenType.BANG, TokenType.MINUS)

# Nesting levels accepted per declaration. One level of expression nesting
# costs about 17 Python frames against the interpreter recursion limit.
MAX_NESTING_DEPTH = 40


class Parser:
    """
    Lox recursive descent parser.

    Iterating a parser yields top-level statements lazily; tokens are only
    pulled from the source as each declaration is parsed. The sequence can
    only be consumed once.
    """

    def __init__(self, tokens: Iterable[Token], filename: str = "<string>",
                 max_depth: int = MAX_NESTING_DEPTH):
        """
        Initialize parser with a token sequence.

        Args:
            tokens: Tokens from the scanner (any iterable, typically lazy)
            filename: Filename for error reporting
            max_depth: Deepest nesting of expressions, statements and
                function bodies accepted before a P007 error
        """
        self.tokens = tokens
        self.filename = filename
        self.max_depth = max_depth
        self._depth = 0
        self.errors: List[ParseError] = []
        self._stream: Optional[TokenStream] = None

    def __iter__(self) -> Iterator[Stmt]:
        return self.parse()

    def parse(self) -> Iterator[Stmt]:
        """
        Yield top-level declarations until end of input.

        Declarations with syntax errors are skipped and recorded in
        ``errors``.

        Raises:
            LexerError: If the underlying scan fails
            RuntimeError: If the parser has already been consumed
        """
        if self._stream is not None:
            raise RuntimeError("Parser can only be consumed once")

        logger.debug("Parsing %s", self.filename)
        self._stream = TokenStream(self.tokens, self.filename)

        count = 0
        while not self._stream.is_at_end():
            start = self._stream.position
            brace_depth = self._stream.depth
            result = self.parse_declaration()

            if result.ok:
                count += 1
                yield result.node
            else:
                self._report(result.error)
                self._synchronize(start, brace_depth)

        logger.debug("Finished parsing %s: %d declarations, %d errors",
                     self.filename, count, len(self.errors))

    def parse_declaration(self) -> ParseResult:
        """Parse one declaration, returning the node or the syntax error."""
        try:
            return ParseResult(node=self._declaration())
        except ParseError as e:
            return ParseResult(error=e)

    def has_errors(self) -> bool:
        """Check if any declaration was dropped because of a syntax error."""
        return len(self.errors) > 0

    def _report(self, error: ParseError):
        self.errors.append(error)
        logger.warning("Skipping declaration (%s): %s",
                       error.diagnostic.location, error.message)

    def _synchronize(self, start: int, brace_depth: int):
        """
        Skip the rest of a broken declaration.

        Stops, once back at the brace depth the declaration started at, after a ';', after the '}' that closes
        the declaration (unless an 'else' follows), or in front of a token
        that starts a declaration.
        """
        stream = self._stream

        # Always make progress past the declaration's first token
        if stream.position == start:
            stream.advance()

        while not stream.is_at_end():
            if stream.depth <= brace_depth:
                previous = stream.previous()
                if previous.type == TokenType.SEMICOLON:
                    break
                if previous.type == TokenType.RIGHT_BRACE and not stream.check(TokenType.ELSE):
                    break
                if stream.value().type in DECLARATION_STARTERS:
                    break
            stream.advance()

        logger.debug("Resynchronized at %s", stream.value())

    @contextmanager
    def _nested(self):
        """Count one level of nesting for the duration of a rule."""
        if self._depth >= self.max_depth:
            raise create_nesting_too_deep_error(self._stream.value(), self.max_depth, self.filename)

        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # ========================================================================
    # Declarations
    # ========================================================================

    def _declaration(self) -> Stmt:
        stream = self._stream

        if stream.match(TokenType.CLASS):
            return self._class_declaration()
        if stream.match(TokenType.FUN):
            return self._function("function")
        if stream.match(TokenType.VAR):
            return self._var_declaration()

        return self._statement()

    def _class_declaration(self) -> ClassDef:
        """Parse a class body; the 'class' keyword is already consumed."""
        stream = self._stream
        name = stream.consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if stream.match(TokenType.LESS):
            superclass_name = stream.consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = Variable(superclass_name)

        stream.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not stream.check(TokenType.RIGHT_BRACE) and not stream.is_at_end():
            methods.append(self._function("method"))

        stream.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return ClassDef(name, superclass, tuple(methods))

    def _function(self, kind: str) -> FunctionDef:
        """Parse a function or method definition (after 'fun', if any)."""
        stream = self._stream
        name = stream.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")

        stream.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params = self._parameters()
        stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        stream.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        with self._nested():
            body = self._block()

        return FunctionDef(name, params, body)

    def _parameters(self) -> Tuple[Token, ...]:
        """Parse parameter names; a comma not followed by a name ends the list."""
        stream = self._stream
        params = []

        while stream.check(TokenType.IDENTIFIER):
            params.append(stream.advance())
            if not stream.match(TokenType.COMMA):
                break

        return tuple(params)

    def _var_declaration(self) -> VariableDecl:
        stream = self._stream
        name = stream.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if stream.match(TokenType.EQUAL):
            initializer = self._expression()

        stream.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VariableDecl(name, initializer)

    # ========================================================================
    # Statements
    # ========================================================================

    def _statement(self) -> Stmt:
        with self._nested():
            return self._statement_body()

    def _statement_body(self) -> Stmt:
        stream = self._stream

        if stream.match(TokenType.FOR):
            return self._for_statement()
        if stream.match(TokenType.IF):
            return self._if_statement()
        if stream.match(TokenType.PRINT):
            return self._print_statement()
        if stream.match(TokenType.RETURN):
            return self._return_statement()
        if stream.match(TokenType.WHILE):
            return self._while_statement()
        if stream.match(TokenType.LEFT_BRACE):
            return BlockStatement(self._block())

        return self._expression_statement()

    def _block(self) -> Tuple[Stmt, ...]:
        """Parse declarations up to the closing brace; '{' is already consumed."""
        stream = self._stream
        statements = []

        while not stream.check(TokenType.RIGHT_BRACE) and not stream.is_at_end():
            statements.append(self._declaration())

        stream.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    def _for_statement(self) -> Stmt:
        """
        Parse a for loop and desugar it into a while loop.

        ``for (init; cond; incr) body`` becomes
        ``{ init; while (cond) { body; incr; } }``.
        """
        stream = self._stream
        stream.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if stream.match(TokenType.SEMICOLON):
            initializer = None
        elif stream.match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not stream.check(TokenType.SEMICOLON):
            condition = self._expression()
        stream.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not stream.check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        if increment is not None:
            body = BlockStatement((body, ExpressionStatement(increment)))
        if condition is None:
            condition = Literal(True)
        body = WhileLoop(condition, body)
        if initializer is not None:
            body = BlockStatement((initializer, body))

        return body

    def _if_statement(self) -> IfStatement:
        stream = self._stream
        stream.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if stream.match(TokenType.ELSE):
            else_branch = self._statement()

        return IfStatement(condition, then_branch, else_branch)

    def _print_statement(self) -> PrintStatement:
        value = self._expression()
        self._stream.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(value)

    def _return_statement(self) -> ReturnStatement:
        stream = self._stream
        keyword = stream.previous()

        value = None
        if not stream.check(TokenType.SEMICOLON):
            value = self._expression()

        stream.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ReturnStatement(keyword, value)

    def _while_statement(self) -> WhileLoop:
        stream = self._stream
        stream.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self._statement()

        return WhileLoop(condition, body)

    def _expression_statement(self) -> ExpressionStatement:
        expr = self._expression()
        self._stream.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr)

    # ========================================================================
    # Expressions, lowest precedence first
    # ========================================================================

    def _expression(self) -> Expr:
        with self._nested():
            return self._assignment()

    def _assignment(self) -> Expr:
        stream = self._stream
        expr = self._or()

        if stream.check(TokenType.EQUAL):
            equals = stream.advance()
            # Right associative
            value = self._expression()

            if isinstance(expr, Variable):
                return Assignment(expr.name, value)
            if isinstance(expr, FieldAccess):
                return FieldAssignment(expr.object, expr.name, value)

            raise create_invalid_assignment_error(equals, self.filename)

        return expr

    def _or(self) -> Expr:
        return self._left_associative(self._and, (TokenType.OR,), LogicalOp)

    def _and(self) -> Expr:
        return self._left_associative(self._equality, (TokenType.AND,), LogicalOp)

    def _equality(self) -> Expr:
        return self._left_associative(self._comparison, EQUALITY_OPERATORS, BinaryOp)

    def _comparison(self) -> Expr:
        return self._left_associative(self._term, COMPARISON_OPERATORS, BinaryOp)

    def _term(self) -> Expr:
        return self._left_associative(self._factor, TERM_OPERATORS, BinaryOp)

    def _factor(self) -> Expr:
        return self._left_associative(self._unary, FACTOR_OPERATORS, BinaryOp)

    def _left_associative(self, operand: Callable[[], Expr],
                          operators: Tuple[TokenType, ...], node_class) -> Expr:
        """Parse ``operand ( op operand )*`` into a left-leaning tree."""
        stream = self._stream
        expr = operand()

        while stream.match(*operators):
            operator = stream.previous()
            right = operand()
            expr = node_class(expr, operator, right)

        return expr

    def _unary(self) -> Expr:
        stream = self._stream

        if stream.match(*UNARY_OPERATORS):
            operator = stream.previous()
            with self._nested():
                right = self._unary()
            return UnaryOp(operator, right)

        return self._call()

    def _call(self) -> Expr:
        stream = self._stream
        expr = self._primary()

        while True:
            if stream.match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif stream.match(TokenType.DOT):
                name = stream.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = FieldAccess(expr, name)
            else:
                break

        return expr

    def _finish_call(self, callee: Expr) -> FunctionCall:
        """Parse call arguments; '(' is already consumed. Trailing commas are allowed."""
        stream = self._stream
        arguments = []

        if not stream.check(TokenType.RIGHT_PAREN):
            arguments.append(self._expression())
            while stream.match(TokenType.COMMA):
                if stream.check(TokenType.RIGHT_PAREN):
                    break
                arguments.append(self._expression())

        paren = stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return FunctionCall(callee, paren, tuple(arguments))

    def _primary(self) -> Expr:
        stream = self._stream

        if stream.match(TokenType.FALSE):
            return Literal(False)
        if stream.match(TokenType.TRUE):
            return Literal(True)
        if stream.match(TokenType.NIL):
            return Literal(None)

        if stream.match(TokenType.NUMBER):
            return Literal(stream.previous().literal)
        if stream.match(TokenType.STRING):
            return Literal(stream.previous().lexeme)

        if stream.match(TokenType.THIS):
            return ThisExpr(stream.previous())

        if stream.match(TokenType.SUPER):
            keyword = stream.previous()
            stream.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = stream.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return SuperAccess(keyword, method)

        if stream.match(TokenType.IDENTIFIER):
            return Variable(stream.previous())

        if stream.match(TokenType.LEFT_PAREN):
            expr = self._expression()
            stream.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise create_expected_expression_error(stream.value(), self.filename)


def parse(source: str, filename: str = "<string>") -> Iterator[Stmt]:
    """
    Lazily scan and parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Iterator of top-level statements
    """
    return Parser(scan(source, filename), filename).parse()


def parse_string(source: str, filename: str = "<string>") -> List[Stmt]:
    """
    Convenience function to parse a whole source string at once.

    Declarations with syntax errors are logged and left out of the result.

    Raises:
        LexerError: If scanning fails
    """
    return list(parse(source, filename))
