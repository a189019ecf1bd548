"""
Lox scanner - turns source text into tokens.

Single forward cursor over the source with one character of lookahead
(two for comment detection). Tokens are produced lazily: nothing is
scanned until the consumer asks for the next token.

Author: xwest
"""

import logging
from typing import Iterator, List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, SINGLE_CHAR_TOKENS,
    EQUAL_SUFFIX_TOKENS
)
from .errors import (
    create_unexpected_character_error, create_unterminated_string_error,
    create_invalid_number_error, create_unterminated_comment_error
)

logger = logging.getLogger(__name__)

WHITESPACE = frozenset(" \t\r")


def is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def is_alphanumeric(char: str) -> bool:
    return is_alpha(char) or is_digit(char)


class Scanner:
    """
    Lox lexical analyzer.

    Iterating a scanner yields tokens in source order, ending with a single
    EOF token. The sequence is lazy and can only be consumed once. The first
    invalid character raises a LexerError and ends the scan.
    """

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the scanner with source code.

        Args:
            source: Source code string
            filename: Name used for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self._started = False

    def __iter__(self) -> Iterator[Token]:
        return self.scan()

    def scan(self) -> Iterator[Token]:
        """
        Yield tokens one at a time.

        Raises:
            LexerError: On the first character that cannot be scanned
            RuntimeError: If the scanner has already been consumed
        """
        if self._started:
            raise RuntimeError("Scanner token stream can only be consumed once")
        self._started = True

        logger.debug("Scanning %s (%d characters)", self.filename, len(self.source))

        count = 0
        while not self._is_at_end():
            token = self._scan_token()
            if token is not None:
                count += 1
                yield token

        logger.debug("Finished scanning %s: %d tokens, %d lines",
                     self.filename, count, self.line)
        yield Token(TokenType.EOF)

    def _scan_token(self) -> Optional[Token]:
        """Consume the next lexeme; return its token, or None if it was skipped."""
        char = self._advance()

        if char in WHITESPACE:
            return None

        if char == "\n":
            self.line += 1
            return None

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[char], char)

        if char in EQUAL_SUFFIX_TOKENS:
            one_char, two_char = EQUAL_SUFFIX_TOKENS[char]
            if self._match("="):
                return self._make_token(two_char, char + "=")
            return self._make_token(one_char, char)

        if char == "/":
            if self._match("/"):
                self._skip_line_comment()
                return None
            if self._match("*"):
                self._skip_block_comment()
                return None
            return self._make_token(TokenType.SLASH, char)

        if char == '"':
            return self._string()

        if is_digit(char):
            return self._number()

        if is_alpha(char):
            return self._identifier()

        raise create_unexpected_character_error(char, self._location())

    def _skip_line_comment(self):
        # The newline itself is left for the main loop to count.
        while not self._is_at_end() and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self):
        start_line = self.line
        while not self._is_at_end():
            if self._peek() == "*" and self._peek_next() == "/":
                self._advance()
                self._advance()
                return
            if self._advance() == "\n":
                self.line += 1

        raise create_unterminated_comment_error(
            SourceLocation(self.filename, start_line)
        )

    def _string(self) -> Token:
        """Scan a string literal; the opening quote is already consumed."""
        start_line = self.line
        start = self.pos

        while not self._is_at_end() and self._peek() != '"':
            if self._advance() == "\n":
                self.line += 1

        if self._is_at_end():
            raise create_unterminated_string_error(
                self.source[start:],
                SourceLocation(self.filename, start_line)
            )

        value = self.source[start:self.pos]
        self._advance()  # Closing quote

        return Token(TokenType.STRING, value, start_line)

    def _number(self) -> Token:
        """Scan a number literal; the first digit is already consumed."""
        start = self.pos - 1

        while is_digit(self._peek()):
            self._advance()

        integer_end = self.pos

        # A fractional part needs at least one digit after the dot
        if self._peek() == "." and is_digit(self._peek_next()):
            self._advance()
            while is_digit(self._peek()):
                self._advance()

        lexeme = self.source[start:self.pos]

        if integer_end - start > 1 and lexeme.startswith("0"):
            raise create_invalid_number_error(
                lexeme,
                self._location(),
                "Multi-digit numbers cannot start with a leading zero."
            )

        return Token(TokenType.NUMBER, lexeme, self.line, float(lexeme))

    def _identifier(self) -> Token:
        """Scan an identifier or reserved word."""
        start = self.pos - 1

        while is_alphanumeric(self._peek()):
            self._advance()

        text = self.source[start:self.pos]
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)

        return self._make_token(token_type, text)

    def _make_token(self, token_type: TokenType, lexeme: str) -> Token:
        return Token(token_type, lexeme, self.line)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line)

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _match(self, expected: str) -> bool:
        """Consume the current character only if it is ``expected``."""
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        """Current character without consuming it, or '' at end."""
        if self._is_at_end():
            return ""
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return ""
        return self.source[self.pos + 1]


def scan(source: str, filename: str = "<string>") -> Iterator[Token]:
    """
    Lazily scan a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        Iterator of tokens ending with an EOF token
    """
    return Scanner(source, filename).scan()


def scan_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to scan a whole source string at once.

    Raises:
        LexerError: If scanning fails
    """
    return list(scan(source, filename))
