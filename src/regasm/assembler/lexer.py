"""
Assembly Language Scanner
=========================

This module implements the scanner (tokenizer) for the register-machine
assembly dialect. It converts source text into a TokenStream that the
resolver then annotates with numeric payloads.

Token Kinds
-----------
- LABEL_DECLARE: identifier immediately followed by ':' (e.g. "loop:")
- LABEL_INITIALIZE: reserved for label use sites, never produced here
- INSTRUCTION: any other identifier (mnemonic)
- REGISTER: 'r' or 'R' followed only by decimal digits (e.g. "r12")
- IMMEDIATE: lexeme starting with a decimal digit (e.g. "10", "0x1A")
- COMMA: ','
- NEWLINE: '\\n' (significant, one token per line break)
- END_OF_INPUT: end of the source
- INVALID: any other single character. A non-ASCII character is still
  one token, so its length (counted in UTF-8 bytes) is 2 to 4

Lexical Rules
-------------
Whitespace other than the newline is skipped. Identifiers start with an
ASCII letter and continue over letters, digits and underscores. A word
that looks like a register but is followed by ':' is a label declaration.

Numbers are scanned as a whole word starting with a digit; the scanner
does not check the digits. "0xFF", "0755" and "10abc" each become one
IMMEDIATE token and the resolver decides whether the spelling is valid.

The scanner never raises. Characters it cannot classify come out as
INVALID tokens, and the stream always ends with exactly one END_OF_INPUT.
A NUL character ends the source just like the end of the string does.

Example
-------
>>> from regasm.assembler.lexer import Lexer
>>> for token in Lexer("mov r1, 10\\n").tokenize():
...     print(repr(token))
Token(INSTRUCTION, 'mov', 1:1)
Token(REGISTER, 'r1', 1:5)
Token(COMMA, ',', 1:7)
Token(IMMEDIATE, '10', 1:9)
Token(NEWLINE, '\\n', 1:11)
Token(END_OF_INPUT, '', 2:1)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from regasm.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Closed set of token kinds produced by the scanner."""

    LABEL_DECLARE = auto()      # name:
    LABEL_INITIALIZE = auto()   # label use site (reserved)
    INSTRUCTION = auto()        # mnemonic
    REGISTER = auto()           # r0, r1, ...
    IMMEDIATE = auto()          # integer literal
    COMMA = auto()              # ,
    NEWLINE = auto()            # \n
    END_OF_INPUT = auto()       # end of source
    INVALID = auto()            # unclassifiable character


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass
class Token:
    """
    A single lexeme from the source, plus its resolved payload.

    Unlike most of the stream, `memory` and `resolved` change after
    scanning: the resolver fills them in place.

    Attributes:
        kind: The TokenKind classification
        text: The exact source text of the lexeme
        offset: Offset of the lexeme's first character in the source
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
        memory: Unsigned 32-bit payload (opcode, value, register, line)
        resolved: True once the resolver has assigned `memory`
    """
    kind: TokenKind
    text: str
    offset: int = 0
    line: int = 1
    column: int = 1
    filename: str = "<input>"
    memory: int = 0
    resolved: bool = False

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    def __str__(self) -> str:
        return (
            f"TokType: {self.kind.name} - {self.display_text} "
            f"(l: {self.length}) (mem: {self.memory})"
        )

    @property
    def length(self) -> int:
        """Length of the lexeme in bytes."""
        return len(self.text.encode("utf-8"))

    @property
    def display_text(self) -> str:
        """Lexeme with control characters escaped, for printing."""
        return self.text.encode("unicode_escape").decode("ascii")

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Token Stream
# =============================================================================

class TokenStream:
    """
    Ordered, append-only sequence of tokens.

    The stream remembers the source it was scanned from so that
    diagnostics can quote the offending line.
    """

    def __init__(
        self,
        tokens: Optional[list[Token]] = None,
        source: str = "",
        filename: str = "<input>",
    ):
        self._tokens: list[Token] = list(tokens) if tokens else []
        self.source = source
        self.filename = filename
        self._lines: Optional[list[str]] = None

    def append(self, token: Token) -> None:
        """Add a token at the end of the stream."""
        self._tokens.append(token)

    def release(self) -> None:
        """Drop every token in the stream."""
        self._tokens.clear()

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index):
        return self._tokens[index]

    def __repr__(self) -> str:
        return f"TokenStream({len(self._tokens)} tokens, {self.filename!r})"

    def kinds(self) -> list[TokenKind]:
        """Return the kind of every token, in order."""
        return [token.kind for token in self._tokens]

    def source_line(self, line: int) -> Optional[str]:
        """
        Get the text of a source line (1-indexed), without its newline.

        Returns None if the stream has no source or the line is out of range.
        """
        if not self.source:
            return None

        # split once, on first use
        if self._lines is None:
            self._lines = self.source.split("\n")

        if not 1 <= line <= len(self._lines):
            return None
        return self._lines[line - 1]

    def dump(self) -> str:
        """Format the stream one token per line."""
        return "\n".join(str(token) for token in self._tokens)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes register-machine assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = lexer.tokenize()

    Attributes:
        source: The source code being tokenized (cut at the first NUL)
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier or a number
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Whitespace that is skipped; newline is a token of its own
    WHITESPACE = " \t\r\v\f"

    SINGLE_CHAR_TOKENS = {
        ",": TokenKind.COMMA,
        "\n": TokenKind.NEWLINE,
    }

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
        """
        nul = source.find("\0")
        if nul != -1:
            logger.debug("%s: source truncated at NUL (offset %d)", filename, nul)
            source = source[:nul]

        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> TokenStream:
        """
        Scan the whole source.

        Returns:
            A TokenStream ending with exactly one END_OF_INPUT token
        """
        tokens = TokenStream(source=self.source, filename=self.filename)

        while True:
            token = self._scan_token()
            tokens.append(token)
            if token.kind is TokenKind.END_OF_INPUT:
                break

        logger.debug("%s: scanned %d tokens", self.filename, len(tokens))
        return tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string at end of source."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _skip_whitespace(self) -> None:
        """Skip whitespace characters except newline."""
        # Note: '' in WHITESPACE is True, so check for end first
        while self._peek() and self._peek() in self.WHITESPACE:
            self._advance()

    def _consume_word(self) -> None:
        """Consume letters, digits and underscores."""
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan exactly one token, skipping leading whitespace."""
        self._skip_whitespace()

        start = self._pos
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if not char:
            kind = TokenKind.END_OF_INPUT
        elif char in self.IDENT_START:
            kind = self._scan_word()
        elif char in string.digits:
            self._consume_word()
            kind = TokenKind.IMMEDIATE
        else:
            self._advance()
            kind = self.SINGLE_CHAR_TOKENS.get(char, TokenKind.INVALID)

        return Token(
            kind=kind,
            text=self.source[start:self._pos],
            offset=start,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _scan_word(self) -> TokenKind:
        """
        Scan an identifier and classify it.

        The classification is instruction by default, register when the
        word is r/R plus digits, and label declaration when a colon
        follows (the colon is consumed and wins over register).
        """
        start = self._pos
        self._consume_word()
        word = self.source[start:self._pos]

        kind = TokenKind.INSTRUCTION
        if is_register_spelling(word):
            kind = TokenKind.REGISTER

        if self._peek() == ":":
            self._advance()
            kind = TokenKind.LABEL_DECLARE

        return kind


def is_register_spelling(word: str) -> bool:
    """Check if a word is 'r' or 'R' followed by at least one decimal digit."""
    return (
        len(word) >= 2
        and word[0].lower() == "r"
        and all(c in string.digits for c in word[1:])
    )


def tokenize(source: str, filename: str = "<input>") -> TokenStream:
    """
    Convenience function to scan source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for diagnostics

    Returns:
        The scanned TokenStream (payloads not yet resolved)
    """
    return Lexer(source, filename).tokenize()
