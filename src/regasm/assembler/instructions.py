"""
Instruction Table
=================

This module defines the mapping from mnemonic spelling to opcode number
for the register-based virtual instruction set.

The table is read-only and is consulted only by the resolver. Lookup is
by exact, case-sensitive string equality: "mov" is an instruction, "MOV"
is not. An unknown mnemonic produces an explicit not-found result (None)
rather than opcode zero, because zero is itself a valid opcode ("nop").

Default Instruction Set
-----------------------
| Group       | Mnemonics                                   |
|-------------|---------------------------------------------|
| Control     | nop, halt                                   |
| Data        | mov, load, store                            |
| Arithmetic  | add, sub, mul, div                          |
| Logic       | and, or, xor, not, shl, shr                 |
| Compare     | cmp                                         |
| Flow        | jmp, jz, jnz, jeq, jne, jlt, jgt, call, ret |
| Stack       | push, pop                                   |
| I/O         | in, out                                     |

Opcodes are assigned in table order starting from 0. The contents are a
deployment parameter: build another InstructionTable to target a
different machine.
"""

from collections.abc import Iterator, Mapping
from typing import Optional

from regasm.errors import ConfigError


# Largest value that fits in a token's 32-bit memory field
UINT32_MAX = 0xFFFFFFFF


# =============================================================================
# Instruction Table
# =============================================================================

class InstructionTable(Mapping):
    """
    Immutable mnemonic -> opcode mapping.

    Behaves as a read-only Mapping, so `"add" in table`, `table["add"]`
    and iteration all work. Use lookup() for the not-found-aware form.
    """

    def __init__(self, entries: Mapping[str, int]):
        for mnemonic, opcode in entries.items():
            if not 0 <= opcode <= UINT32_MAX:
                raise ConfigError(
                    f"opcode {opcode} for '{mnemonic}' does not fit in 32 bits"
                )
        self._entries: dict[str, int] = dict(entries)

    @classmethod
    def from_mnemonics(cls, mnemonics: list[str]) -> "InstructionTable":
        """Build a table numbering the mnemonics in order from 0."""
        return cls({name: opcode for opcode, name in enumerate(mnemonics)})

    def __getitem__(self, mnemonic: str) -> int:
        return self._entries[mnemonic]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"InstructionTable({len(self._entries)} mnemonics)"

    def lookup(self, mnemonic: str) -> Optional[int]:
        """
        Look up the opcode for a mnemonic.

        Args:
            mnemonic: The exact lexeme produced by the scanner

        Returns:
            The opcode, or None if the mnemonic is not in the table
        """
        return self._entries.get(mnemonic)

    def similar(self, mnemonic: str) -> list[str]:
        """
        Find mnemonics with similar spelling for error hints.

        Uses a simple edit distance heuristic; case differences count as
        a match so that "MOV" suggests "mov".
        """
        name_lower = mnemonic.lower()
        similar = []

        for known in self._entries:
            known_lower = known.lower()
            if (
                known_lower == name_lower or
                abs(len(known) - len(mnemonic)) <= 1 and
                _edit_distance(name_lower, known_lower) <= 1
            ):
                similar.append(known)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]


# =============================================================================
# Default Table
# =============================================================================

MNEMONICS: tuple[str, ...] = (
    "nop", "halt",
    "mov", "load", "store",
    "add", "sub", "mul", "div",
    "and", "or", "xor", "not", "shl", "shr",
    "cmp",
    "jmp", "jz", "jnz", "jeq", "jne", "jlt", "jgt", "call", "ret",
    "push", "pop",
    "in", "out",
)

DEFAULT_INSTRUCTIONS = InstructionTable.from_mnemonics(list(MNEMONICS))


def get_opcode(mnemonic: str) -> Optional[int]:
    """
    Look up a mnemonic in the default table.

    Returns:
        The opcode, or None if unknown
    """
    return DEFAULT_INSTRUCTIONS.lookup(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is in the default table."""
    return mnemonic in DEFAULT_INSTRUCTIONS
