"""
regasm - Front-End for a Register-Machine Assembler
===================================================

This package turns line-oriented assembly source into a token stream in
which every token carries a numeric payload: opcode, register index,
immediate value or label line. The stream is the hand-off to a code
emission stage.

Main Components
---------------
- **assembler**: Scanner, resolver, instruction table and configuration
    Converts source text (.s) into an annotated TokenStream

- **errors**: Exception hierarchy and the Diagnostics sink

- **cli**: Command-line tool (rasm)
    Prints the annotated token stream of a source file

Quick Start
-----------
>>> from regasm import Assembler
>>> asm = Assembler()
>>> tokens = asm.tokenize_string("loop:\\nadd r0, r1\\n")
>>> print(asm.get_token_dump())
"""

__version__ = "0.1.0"
__author__ = "regasm contributors"

from regasm.errors import (
    RegasmError,
    AssemblerError,
    UnknownTokenError,
    MalformedNumberError,
    UnknownMnemonicError,
    ConfigError,
    Diagnostics,
)
from regasm.assembler import (
    Assembler,
    AssemblerConfig,
    Token,
    TokenKind,
    TokenStream,
    tokenize,
    resolve,
)

__all__ = [
    "__version__",
    # Errors
    "RegasmError",
    "AssemblerError",
    "UnknownTokenError",
    "MalformedNumberError",
    "UnknownMnemonicError",
    "ConfigError",
    "Diagnostics",
    # Front-end
    "Assembler",
    "AssemblerConfig",
    "Token",
    "TokenKind",
    "TokenStream",
    "tokenize",
    "resolve",
]
