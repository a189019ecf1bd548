"""
loxfront - Lox Language Front End

A from-scratch scanner and recursive descent parser for the Lox scripting
language. Source text becomes a lazy stream of tokens, and tokens become a
lazy stream of top-level declarations (the AST handed to an interpreter).

Architecture:
    loxfront/
    ├── lexer/           # Tokenization and lexical analysis
    └── parser/          # Syntax analysis, AST nodes and source printing

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Scanner, Token, TokenType, LexerError, scan
from .parser import Parser, ParseError, parse, parse_string

__all__ = [
    # Core classes
    "Scanner",
    "Parser",
    "Token",
    "TokenType",

    # Convenience functions
    "scan",
    "parse",
    "parse_string",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
