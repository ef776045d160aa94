"""
Assembler Front-End - Main Interface
====================================

This module provides the Assembler class, the primary interface to the
front-end. It runs the scanner and the resolver over a source and keeps
the annotated TokenStream and the diagnostics for the caller.

Example Usage
-------------
>>> from regasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> tokens = asm.tokenize_string('''start:
... mov r1, 10
... jmp start
... ''')
>>>
>>> tokens[0].memory          # start: sits on line 0
0
>>> tokens[8].resolved        # label operand, left for a later stage
False
>>> asm.has_errors()
False
>>> print(asm.get_token_dump())

Command-Line Usage
------------------
    $ rasm program.s
    $ rasm --max-register 15 program.s
"""

from pathlib import Path
from typing import Optional, TextIO
import logging

from regasm.assembler.config import AssemblerConfig
from regasm.assembler.lexer import Lexer, TokenStream
from regasm.assembler.resolver import Resolver
from regasm.errors import Diagnostics

logger = logging.getLogger(__name__)


class Assembler:
    """
    Scanner + resolver pipeline.

    Diagnostics are collected rather than raised, so a single run reports
    every malformed token. Check has_errors() after tokenizing.

    Attributes:
        config: Register bound and instruction table in use
    """

    def __init__(self, config: Optional[AssemblerConfig] = None,
                 stream: Optional[TextIO] = None):
        """
        Initialize the front-end.

        Args:
            config: Configuration (default: AssemblerConfig())
            stream: Text stream that receives each diagnostic as it is
                    reported (optional; the report is always available
                    from get_error_report())
        """
        self.config = config if config is not None else AssemblerConfig()
        self.config.validate()
        self._diagnostics = Diagnostics(stream=stream)
        self._tokens: Optional[TokenStream] = None

    # =========================================================================
    # Tokenizing
    # =========================================================================

    def tokenize_string(self, source: str, filename: str = "<input>") -> TokenStream:
        """
        Scan and resolve source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for diagnostics

        Returns:
            The annotated TokenStream
        """
        self._diagnostics.clear()

        tokens = Lexer(source, filename).tokenize()
        self._tokens = tokens
        Resolver(self.config, self._diagnostics).resolve(tokens)

        logger.info(
            "%s: %d tokens, %d diagnostics",
            filename, len(tokens), self._diagnostics.error_count(),
        )

        return tokens

    def tokenize_file(self, filepath: str | Path) -> TokenStream:
        """
        Scan and resolve an assembly source file.

        Args:
            filepath: Path to the source file (read as UTF-8)

        Returns:
            The annotated TokenStream

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        logger.info("Reading %s", filepath)

        source = filepath.read_text(encoding="utf-8")
        return self.tokenize_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def get_tokens(self) -> Optional[TokenStream]:
        """Return the stream from the last run, or None before any run."""
        return self._tokens

    def get_token_dump(self) -> str:
        """
        Format the last stream one token per line:

            TokType: INSTRUCTION - mov (l: 3) (mem: 2)
        """
        if self._tokens is None:
            return ""
        return self._tokens.dump()

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Check if the last run reported diagnostics."""
        return self._diagnostics.has_errors()

    def has_fatal_errors(self) -> bool:
        """Check if the last run stopped on an unknown token."""
        return self._diagnostics.has_fatal()

    def get_errors(self) -> list:
        """Return the diagnostics of the last run."""
        return list(self._diagnostics.errors)

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self._diagnostics.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize_and_resolve(source: str, filename: str = "<input>",
                         config: Optional[AssemblerConfig] = None) -> TokenStream:
    """
    Convenience function to scan and resolve source code.

    Diagnostics are discarded; use Assembler to inspect them.
    """
    return Assembler(config).tokenize_string(source, filename)
