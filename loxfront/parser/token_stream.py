"""
Two-token lookahead buffer over a lazily produced token sequence.

Author: xwest
"""

from typing import Iterable, Iterator, Optional

from ..lexer.tokens import Token, TokenType
from .errors import create_unexpected_token_error, create_unexpected_eof_error

_EOF = Token(TokenType.EOF)


class TokenStream:
    """
    Holds the current and the next token of an underlying token iterator.

    Tokens are pulled from the source one at a time as the stream advances.
    Because the next token is always buffered, a lexical error surfaces when
    the parser is one token short of it, not when the bad token becomes
    current. A source that runs dry without producing EOF is treated as if
    it had.
    """

    def __init__(self, tokens: Iterable[Token], filename: str = "<string>"):
        self._source: Iterator[Token] = iter(tokens)
        self.filename = filename
        self._previous: Optional[Token] = None
        self.position = 0  # Tokens consumed so far
        self.depth = 0  # Unclosed "{" consumed so far
        self._current = self._pull()
        self._next = self._pull() if self._current.type != TokenType.EOF else _EOF

    def _pull(self) -> Token:
        return next(self._source, _EOF)

    def value(self) -> Token:
        """Return the current token without consuming it."""
        return self._current

    def peek(self) -> Token:
        """Return the token after the current one."""
        return self._next

    def previous(self) -> Optional[Token]:
        """Return the most recently consumed token."""
        return self._previous

    def advance(self) -> Token:
        """Consume the current token and return it."""
        token = self._current
        if token.type == TokenType.EOF:
            return token

        if token.type == TokenType.LEFT_BRACE:
            self.depth += 1
        elif token.type == TokenType.RIGHT_BRACE and self.depth > 0:
            self.depth -= 1

        self.position += 1
        self._previous = token
        self._current = self._next
        # Stop pulling once EOF is buffered
        self._next = self._pull() if self._next.type != TokenType.EOF else _EOF
        return token

    def is_at_end(self) -> bool:
        return self._current.type == TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._current.type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it matches any of the given types."""
        if self._current.type in token_types:
            self.advance()
            return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consume a token of the expected type or raise.

        Consuming at end of input always fails, whatever type is expected.

        Raises:
            ParseError: If the current token is EOF or of another type
        """
        current = self._current
        if current.type == TokenType.EOF:
            raise create_unexpected_eof_error(token_type, current, message, self.filename)
        if current.type != token_type:
            raise create_unexpected_token_error(token_type, current, message, self.filename)
        return self.advance()
