"""
Register-Machine Assembler Front-End
====================================

This package turns assembly source text into an annotated token stream:
every token carries a numeric payload ready for a code emission stage.

Main Components
---------------
- **Assembler**: Runs the scanner and resolver and collects diagnostics
- **Lexer**: Classifies lexemes into TokenKinds (no validation)
- **Resolver**: Two passes; label line indices, then opcodes, immediates
  and register indices
- **InstructionTable**: Mnemonic -> opcode mapping
- **AssemblerConfig**: Register bound and instruction table in use

Pipeline
--------
1. **Scanning (Lexer)**:
   - Skip blanks, keep newlines as tokens
   - Classify words as instruction, register or label declaration
   - Unknown characters become INVALID tokens

2. **Resolution (Resolver)** (two-pass):
   - Pass 1: count newlines, give each label its line index
   - Pass 2: fill payloads, report malformed tokens, stop on INVALID

Example Usage
-------------
>>> from regasm.assembler import Assembler
>>> asm = Assembler()
>>> tokens = asm.tokenize_string("mov r1, 0x1A\\n")
>>> [t.memory for t in tokens]
[2, 1, 0, 26, 0, 0]
"""

from regasm.assembler.assembler import Assembler, tokenize_and_resolve
from regasm.assembler.config import AssemblerConfig, MAX_REGISTER
from regasm.assembler.instructions import (
    DEFAULT_INSTRUCTIONS,
    InstructionTable,
    get_opcode,
)
from regasm.assembler.lexer import Lexer, Token, TokenKind, TokenStream, tokenize
from regasm.assembler.numbers import parse_c_integer
from regasm.assembler.resolver import LabelEntry, Resolver, resolve

__all__ = [
    "Assembler",
    "AssemblerConfig",
    "DEFAULT_INSTRUCTIONS",
    "InstructionTable",
    "LabelEntry",
    "Lexer",
    "MAX_REGISTER",
    "Resolver",
    "Token",
    "TokenKind",
    "TokenStream",
    "get_opcode",
    "parse_c_integer",
    "resolve",
    "tokenize",
    "tokenize_and_resolve",
]
