"""
Token Resolver
==============

This module fills in the numeric payload (`memory`) of every token in a
scanned TokenStream. It is the semantic half of the front-end: the
scanner only classifies lexemes, the resolver checks that they make sense.

Two-Pass Resolution
-------------------
Pass 1: Label addresses
    - Count NEWLINE tokens as the stream is walked
    - Give every LABEL_DECLARE the number of newlines seen before it
    - Record each label (name without ':') in a side table

Pass 2: Payloads
    - INSTRUCTION: opcode from the instruction table
    - IMMEDIATE: value of the literal (0x hex, 0 octal, else decimal)
    - REGISTER: index after the leading 'r', bounded by max_register
    - INVALID: fatal, resolution stops here

Error Policy
------------
Every problem is reported to the Diagnostics sink. Malformed numbers and
unknown mnemonics are not fatal: the token keeps memory = 0, stays
unresolved, and the pass moves on. An INVALID token is fatal: the pass
stops at it and later tokens are left untouched.

A word that names a label declared in pass 1 (as in "jmp loop") is not in
the instruction table either. It stays unresolved with memory = 0, but no
diagnostic is reported for it.

Reaching the sink's error cap does not stop the pass. Further non-fatal
diagnostics are dropped and payloads are still assigned to the rest of
the stream.

Running the resolver again on the same stream gives the same result;
every payload is reset before pass 1.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from regasm.assembler.config import AssemblerConfig
from regasm.assembler.instructions import UINT32_MAX
from regasm.assembler.lexer import Token, TokenKind, TokenStream
from regasm.assembler.numbers import parse_c_integer
from regasm.errors import (
    AssemblerError,
    Diagnostics,
    MalformedNumberError,
    TooManyErrors,
    UnknownMnemonicError,
    UnknownTokenError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelEntry:
    """A label declaration seen in pass 1: name without ':' and its line."""
    name: str
    line: int


class Resolver:
    """
    Assigns payloads to scanned tokens.

    Usage:
        diagnostics = Diagnostics()
        Resolver(config, diagnostics).resolve(tokens)

    Attributes:
        config: Register bound and instruction table
        diagnostics: Sink receiving every reported error

    Raises:
        ConfigError: If the configuration is invalid
    """

    def __init__(
        self,
        config: Optional[AssemblerConfig] = None,
        diagnostics: Optional[Diagnostics] = None,
    ):
        self.config = config if config is not None else AssemblerConfig()
        self.config.validate()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._labels: list[LabelEntry] = []
        self._label_names: set[str] = set()
        self._capped = False

    def resolve(self, tokens: TokenStream) -> None:
        """
        Resolve every token of the stream in place.

        Args:
            tokens: Stream produced by the scanner
        """
        self._capped = False
        try:
            for token in tokens:
                token.memory = 0
                token.resolved = False

            self._labels = self._assign_label_addresses(tokens)
            self._label_names = {label.name for label in self._labels}
            logger.debug(
                "%s: %d labels: %s",
                tokens.filename,
                len(self._labels),
                ", ".join(f"{label.name}={label.line}" for label in self._labels),
            )

            self._assign_payloads(tokens)
        finally:
            self._labels.clear()
            self._label_names.clear()

    # =========================================================================
    # Pass 1: Label Addresses
    # =========================================================================

    def _assign_label_addresses(self, tokens: TokenStream) -> list[LabelEntry]:
        """Give each label declaration its line index and collect the labels."""
        labels = []
        line = 0

        for token in tokens:
            if token.kind is TokenKind.NEWLINE:
                line += 1
            elif token.kind is TokenKind.LABEL_DECLARE:
                token.memory = line
                token.resolved = True
                labels.append(LabelEntry(token.text[:-1], line))

        return labels

    # =========================================================================
    # Pass 2: Payloads
    # =========================================================================

    def _assign_payloads(self, tokens: TokenStream) -> None:
        """Assign opcodes, immediates and register indices; stop on INVALID."""
        for token in tokens:
            if token.kind is TokenKind.INVALID:
                self._report(UnknownTokenError(
                    token.text,
                    location=token.location,
                    source_line=tokens.source_line(token.line),
                ))
                logger.debug("%s: resolution aborted at %r", tokens.filename, token)
                return

            if token.kind is TokenKind.INSTRUCTION:
                self._resolve_instruction(token, tokens)
            elif token.kind is TokenKind.IMMEDIATE:
                self._resolve_immediate(token, tokens)
            elif token.kind is TokenKind.REGISTER:
                self._resolve_register(token, tokens)

    def _report(self, error: AssemblerError) -> None:
        """
        Record a diagnostic without letting the error cap end the pass.

        Once the sink is full, non-fatal errors are dropped; a fatal one
        is still recorded so callers can tell the pass was aborted.
        """
        if self._capped and not error.fatal:
            return

        try:
            self.diagnostics.add(error)
        except TooManyErrors:
            if not self._capped:
                logger.warning(
                    "diagnostic limit (%d) reached, further errors suppressed",
                    self.diagnostics.max_errors,
                )
            self._capped = True

    def _resolve_instruction(self, token: Token, tokens: TokenStream) -> None:
        opcode = self.config.instructions.lookup(token.text)
        if opcode is None:
            # label operand: left unresolved for a later stage
            if token.text in self._label_names:
                return
            self._report(UnknownMnemonicError(
                token.text,
                location=token.location,
                source_line=tokens.source_line(token.line),
                similar=self.config.instructions.similar(token.text),
            ))
            return

        token.memory = opcode
        token.resolved = True

    def _resolve_immediate(self, token: Token, tokens: TokenStream) -> None:
        value = parse_c_integer(token.text)

        hint = None
        if value is not None and value > UINT32_MAX:
            hint = f"immediates must fit in 32 bits (at most {UINT32_MAX})"
        elif value is None:
            hint = "use decimal, 0x hexadecimal or 0 octal digits only"

        if hint:
            self._report(MalformedNumberError(
                token.text,
                kind="immediate",
                location=token.location,
                hint=hint,
                source_line=tokens.source_line(token.line),
            ))
            return

        token.memory = value
        token.resolved = True

    def _resolve_register(self, token: Token, tokens: TokenStream) -> None:
        index = parse_c_integer(token.text[1:])

        if index is None or index > self.config.max_register:
            self._report(MalformedNumberError(
                token.text,
                kind="register",
                location=token.location,
                hint=f"register indices range from 0 to {self.config.max_register}",
                source_line=tokens.source_line(token.line),
            ))
            return

        token.memory = index
        token.resolved = True


def resolve(
    tokens: TokenStream,
    config: Optional[AssemblerConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Diagnostics:
    """
    Convenience function to resolve a stream.

    Returns:
        The Diagnostics sink holding any reported errors
    """
    resolver = Resolver(config, diagnostics)
    resolver.resolve(tokens)
    return resolver.diagnostics
