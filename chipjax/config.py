"""Interpreter configuration switches."""

from enum import Enum


class Dialect(str, Enum):
    """Which historical interpreter the ambiguous opcodes follow.

    COSMAC is the original RCA 1802 interpreter, SCHIP the later HP-48
    Super-CHIP one. Only 8XY6, 8XYE, FX55 and FX65 differ.
    """
    COSMAC = "cosmac"
    SCHIP = "schip"


class WrapMode(str, Enum):
    """How DXYN treats sprite pixels that fall past the screen edges."""
    WRAP = "wrap"
    CLIP = "clip"
