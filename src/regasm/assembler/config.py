"""
regasm Configuration
====================

Front-end configuration: the register bound and the instruction table.
Configuration can come from:
- Default values (defined here)
- Keyword arguments / CLI options
- Environment variables (AssemblerConfig.from_env)

Environment variables (all optional):
    REGASM_MAX_REGISTER: highest valid register index. Accepts the same
        spellings as immediates: decimal, 0x hexadecimal, 0 octal.
"""

from dataclasses import dataclass, field
import os

from regasm.assembler.instructions import (
    DEFAULT_INSTRUCTIONS,
    UINT32_MAX,
    InstructionTable,
)
from regasm.assembler.numbers import parse_c_integer
from regasm.errors import ConfigError


# Highest register index accepted by default (r0 .. r31)
MAX_REGISTER = 31

ENV_MAX_REGISTER = "REGASM_MAX_REGISTER"


@dataclass
class AssemblerConfig:
    """
    Configuration for the scanner/resolver pipeline.

    Attributes:
        max_register: Register indices strictly greater than this are rejected
        instructions: Mnemonic -> opcode table used by the resolver
    """

    max_register: int = MAX_REGISTER
    instructions: InstructionTable = field(default_factory=lambda: DEFAULT_INSTRUCTIONS)

    def validate(self) -> None:
        """
        Check that every value is usable.

        Raises:
            ConfigError: If max_register is not an unsigned 32-bit value
        """
        if not 0 <= self.max_register <= UINT32_MAX:
            raise ConfigError(
                f"max_register must be between 0 and {UINT32_MAX}, "
                f"got {self.max_register}"
            )

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create an AssemblerConfig from environment variables.

        Raises:
            ConfigError: If a variable is set to an unusable value
        """
        config = cls()

        if value := os.environ.get(ENV_MAX_REGISTER):
            parsed = parse_c_integer(value.strip())
            if parsed is None:
                raise ConfigError(
                    f"{ENV_MAX_REGISTER} must be an integer, got '{value}'"
                )
            config.max_register = parsed

        config.validate()
        return config
