"""
Error handling for the Lox parser.

Provides error reporting with source location information and
IDE-friendly diagnostics for syntax errors, plus the ``ParseResult``
value the parser uses to hand recoverable errors back to its caller.

Author: xwest
"""

from typing import Optional, List, Union, Any
from dataclasses import dataclass

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    ``token`` is the token the parser was looking at when it failed.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def line(self) -> Optional[int]:
        return self.diagnostic.location.line

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one declaration: a node or the error that stopped it."""
    node: Any = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P005": "Expected expression",
    "P006": "Invalid assignment target",
    "P007": "Nesting too deep",
    "P010": "Unexpected end of input",
}

# Suggestions for commonly missing tokens
_TOKEN_SUGGESTIONS = {
    TokenType.SEMICOLON: ["Add a semicolon ';' to end the statement"],
    TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
    TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
    TokenType.LEFT_BRACE: ["Add an opening brace '{' to start a block"],
    TokenType.LEFT_PAREN: ["Add an opening parenthesis '('"],
}


def _where(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "at end"
    return f"at '{token.lexeme}'"


def _location(token: Token, filename: str) -> SourceLocation:
    return SourceLocation(filename, token.line)


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token,
                                  message: str, filename: str = "<string>") -> ParseError:
    """Create an error for a token of the wrong type."""
    expected_str = expected.name if isinstance(expected, TokenType) else expected

    return ParseError(
        message=f"{message} (found {found.type.name} {_where(found)})",
        location=_location(found, filename),
        token=found,
        code="P001",
        help_text=f"The parser expected {expected_str} here.",
        suggestions=_TOKEN_SUGGESTIONS.get(expected, []) if isinstance(expected, TokenType) else []
    )


def create_unexpected_eof_error(expected: Union[TokenType, str], found: Token,
                                message: str, filename: str = "<string>") -> ParseError:
    """Create an error for input that ends in the middle of a construct."""
    expected_str = expected.name if isinstance(expected, TokenType) else expected

    return ParseError(
        message=f"{message} (found {_where(found)})",
        location=_location(found, filename),
        token=found,
        code="P010",
        help_text=f"The input ended while the parser expected {expected_str}.",
        suggestions=_TOKEN_SUGGESTIONS.get(expected, []) if isinstance(expected, TokenType) else []
    )


def create_expected_expression_error(found: Token, filename: str = "<string>") -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Expect expression (found {_where(found)})",
        location=_location(found, filename),
        token=found,
        code="P005",
        help_text="An expression must start with a literal, a name, '(', '!', '-', 'this' or 'super'."
    )


def create_invalid_assignment_error(equals: Token, filename: str = "<string>") -> ParseError:
    """Create an error for assigning to something that is not a variable or property."""
    return ParseError(
        message=f"Invalid assignment target {_where(equals)}",
        location=_location(equals, filename),
        token=equals,
        code="P006",
        help_text="Only variables and object properties can be assigned to."
    )


def create_nesting_too_deep_error(found: Token, limit: int, filename: str = "<string>") -> ParseError:
    """Create an error for expressions or statements nested past the parser's limit."""
    return ParseError(
        message=f"Too much nesting (more than {limit} levels) {_where(found)}",
        location=_location(found, filename),
        token=found,
        code="P007",
        help_text="Split the deeply nested code into smaller functions or variables.",
        suggestions=["Move inner parts into local variables"]
    )
