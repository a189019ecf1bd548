"""
Lox Lexer Package

Implements a hand-written, single-pass scanner for the Lox language.

Key Features:
- Lazy token production (generator based)
- Longest-match two-character operators (!=, ==, <=, >=)
- Line and block comments, with line tracking through both
- Multi-line string literals
- Fatal diagnostics with error codes and help text

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .scanner import Scanner, scan, scan_string
from .errors import Diagnostic, LexerError

__all__ = [
    "Scanner",
    "scan",
    "scan_string",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "Diagnostic",
    "LexerError",
]
