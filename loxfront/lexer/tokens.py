"""
Token definitions for the Lox scanner.

This module defines all token types the scanner can produce:
- Single and double character punctuation/operators
- Literals (identifiers, strings, numbers)
- Reserved keywords
- The end-of-input marker

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional


class TokenType(Enum):
    """
    Enumeration of all token types in Lox.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Single-character tokens
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    COMMA = auto()                  # ,
    DOT = auto()                    # .
    MINUS = auto()                  # -
    PLUS = auto()                   # +
    SEMICOLON = auto()              # ;
    SLASH = auto()                  # /
    STAR = auto()                   # *

    # ========================================================================
    # One or two character tokens
    # ========================================================================
    BANG = auto()                   # ! (logical not)
    BANG_EQUAL = auto()             # !=
    EQUAL = auto()                  # =
    EQUAL_EQUAL = auto()            # ==
    GREATER = auto()                # >
    GREATER_EQUAL = auto()          # >=
    LESS = auto()                   # <
    LESS_EQUAL = auto()             # <=

    # ========================================================================
    # Literals
    # ========================================================================
    IDENTIFIER = auto()             # counter, _tmp, th1s
    STRING = auto()                 # "hello"
    NUMBER = auto()                 # 123, 12.3

    # ========================================================================
    # Keywords
    # ========================================================================
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input


@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the source, used for diagnostics.

    ``line`` is None for the end-of-input marker, which carries no line.
    """
    filename: str
    line: Optional[int]

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.filename}:<eof>"
        return f"{self.filename}:{self.line}"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Lox language.

    ``lexeme`` is the source text backing the token (string contents without
    their quotes). ``literal`` is only set on NUMBER tokens. The end-of-input
    token has neither a lexeme nor a line.
    """
    type: TokenType
    lexeme: Optional[str] = None
    line: Optional[int] = None
    literal: Optional[float] = None

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return "EOF"
        if self.literal is not None:
            return f"{self.type.name}({self.lexeme!r} -> {self.literal!r})"
        return f"{self.type.name}({self.lexeme!r})"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type in KEYWORD_TYPES


# Reserved words, shared by every scanner instance. Read-only.
KEYWORDS = MappingProxyType({
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
})

KEYWORD_TYPES = frozenset(KEYWORDS.values())

LITERALS = frozenset({
    TokenType.STRING, TokenType.NUMBER,
    TokenType.TRUE, TokenType.FALSE, TokenType.NIL,
})

SINGLE_CHAR_TOKENS = MappingProxyType({
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
})

# Operators that have a two-character "<op>=" form: char -> (one, two)
EQUAL_SUFFIX_TOKENS = MappingProxyType({
    "!": (TokenType.BANG, TokenType.BANG_EQUAL),
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
})
