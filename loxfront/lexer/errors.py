"""
Error handling for the Lox scanner.

Provides error reporting with source location information and
IDE-friendly diagnostics. Lexical errors are fatal: the scanner stops at
the first one, since token boundaries past an invalid character are
ambiguous.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the scanner encounters invalid input.

    ``value`` holds the offending character (or a short excerpt of the
    offending text) and ``line`` the 1-based line it was found on.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        value: str = "",
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.value = value
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def line(self) -> Optional[int]:
        return self.diagnostic.location.line

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Unexpected character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L004": "Unterminated block comment",
}


def create_unexpected_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that cannot start any token."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Lox source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Unexpected character: '{char}'",
        location=location,
        value=char,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(fragment: str, location: SourceLocation) -> LexerError:
    """Create an error for a string literal that runs to the end of input."""
    return LexerError(
        message="Unterminated string",
        location=location,
        value=fragment[:20],
        code="L002",
        help_text="String literals must be closed with a matching '\"' quote.",
        suggestions=['Add a closing \'"\' quote']
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    integer_part, dot, fraction = lexeme.partition(".")
    corrected = (integer_part.lstrip("0") or "0") + dot + fraction

    return LexerError(
        message=f"Invalid number: '{lexeme}'",
        location=location,
        value=lexeme,
        code="L003",
        help_text=reason,
        suggestions=[f"Write '{corrected}' instead"]
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexerError:
    """Create an error for a block comment that is never closed."""
    return LexerError(
        message="Unterminated block comment",
        location=location,
        value="/*",
        code="L004",
        help_text="Block comments opened with '/*' must be closed with '*/'.",
        suggestions=["Add a closing '*/'"]
    )
