"""
regasm Error Hierarchy
======================

This module defines the exception hierarchy for the regasm front-end.
All exceptions inherit from RegasmError, allowing callers to catch every
front-end error with a single except clause if desired.

Exception Hierarchy
-------------------
RegasmError (base)
└── AssemblerError (source-related)
    ├── UnknownTokenError - byte the scanner could not classify (fatal)
    ├── MalformedNumberError - bad immediate or register index
    ├── UnknownMnemonicError - mnemonic missing from the instruction table
    ├── ConfigError - invalid configuration value
    └── TooManyErrors - diagnostic limit reached

Only UnknownTokenError stops resolution. The other source errors are
collected by the Diagnostics sink and resolution continues.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, TextIO
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception Class
# =============================================================================

class RegasmError(Exception):
    """
    Base exception for all regasm errors.

        try:
            asm.tokenize_file("program.s")
        except RegasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(RegasmError):
    """
    Base exception for all source-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    # Fatal errors abort the resolver; the rest are reported and skipped
    fatal = False

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.s:3:9: error: invalid register value 'r99'
                mov r99, 0
                    ^
            hint: register indices range from 0 to 31
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnknownTokenError(AssemblerError):
    """
    The scanner produced an INVALID token.

    Raised (reported) by the resolver for a character that does not
    start any lexeme of the dialect, e.g. '@' or '#'. This is the only
    fatal diagnostic: resolution stops at the offending token.
    """

    fatal = True

    def __init__(
        self,
        lexeme: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.lexeme = lexeme
        super().__init__(
            f"unknown token '{lexeme}'",
            location=location,
            source_line=source_line,
        )


class MalformedNumberError(AssemblerError):
    """
    An IMMEDIATE or REGISTER lexeme could not be turned into a number.

    Covers digits that do not belong to the detected base (10abc, 08),
    values that do not fit in 32 bits, and register indices above the
    configured maximum.
    """

    def __init__(
        self,
        lexeme: str,
        kind: str = "immediate",
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.lexeme = lexeme
        self.kind = kind
        super().__init__(
            f"invalid {kind} value '{lexeme}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownMnemonicError(AssemblerError):
    """
    An INSTRUCTION lexeme is not in the instruction table.

    The token keeps memory = 0 and is left unresolved so that a later
    stage can tell it apart from a mnemonic whose opcode is zero.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ConfigError(AssemblerError):
    """Invalid configuration value (e.g. a negative register bound)."""
    pass


class TooManyErrors(AssemblerError):
    """
    Raised when too many errors have been encountered.

    This prevents a badly broken source from flooding the diagnostic sink.
    """

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)


# =============================================================================
# Diagnostic Sink
# =============================================================================

class Diagnostics:
    """
    Collects diagnostics for batch reporting.

    The resolver reports every malformed token here and keeps going;
    only a fatal error makes it stop. When a stream is given, each
    message is also written to it as soon as it is reported.

    Example:
        diagnostics = Diagnostics(stream=sys.stderr)
        Resolver(diagnostics=diagnostics).resolve(tokens)

        if diagnostics.has_errors():
            print(diagnostics.report())
            sys.exit(1)
    """

    def __init__(self, stream: Optional[TextIO] = None, max_errors: int = 100):
        """
        Initialize the collector.

        Args:
            stream: Text stream to echo each message to (optional)
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.stream = stream
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        logger.debug("diagnostic recorded: %s", error.message)

        if self.stream is not None:
            self.stream.write(f"{error}\n")

        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(f"Too many errors ({self.max_errors}), stopping")

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def has_fatal(self) -> bool:
        """Return True if a fatal error has been collected."""
        return any(error.fatal for error in self.errors)

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, followed by a summary line."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
