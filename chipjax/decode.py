"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
import numpy as np
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# 8XYN sub-opcodes that exist
ALU_OPCODES = np.zeros(16, dtype=np.bool_)
ALU_OPCODES[[0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE]] = True

# FXNN sub-opcodes that exist, in dispatch order
MISC_OPCODES = (0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65)
MISC_VALID = np.zeros(256, dtype=np.bool_)
MISC_VALID[list(MISC_OPCODES)] = True


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = jnp.asarray(instruction, dtype=jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


def is_legal(instruction: DecodedInstruction) -> jnp.ndarray:
    """Whether the word is one of the 35 defined instructions."""
    opcode = instruction.opcode
    return jnp.select(
        [
            opcode == 0x0,
            (opcode == 0x5) | (opcode == 0x9),
            opcode == 0x8,
            opcode == 0xE,
            opcode == 0xF,
        ],
        [
            (instruction.raw == 0x00E0) | (instruction.raw == 0x00EE),
            instruction.n == 0,
            jnp.asarray(ALU_OPCODES)[instruction.n],
            (instruction.nn == 0x9E) | (instruction.nn == 0xA1),
            jnp.asarray(MISC_VALID)[instruction.nn],
        ],
        default=True,
    )
