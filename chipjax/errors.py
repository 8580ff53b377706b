"""Errors raised by the host-facing side of the machine."""

from chipjax.state import MachineState


class Chip8Error(Exception):
    """Base class for machine errors."""


class IllegalOpcode(Chip8Error):
    """The fetched instruction word is not a CHIP-8 instruction."""

    def __init__(self, opcode: int, address: int = None):
        self.opcode = opcode
        self.address = address
        message = f"Illegal opcode 0x{opcode:04X}"
        if address is not None:
            message += f" at 0x{address:03X}"
        super().__init__(message)


class MachineNotPowered(Chip8Error, RuntimeError):
    """A cycle was requested before any ROM was loaded."""


def raise_for_fault(state: MachineState):
    """Raise IllegalOpcode if the last cycle of state hit an undefined word."""
    if bool(state.faulted):
        raise IllegalOpcode(int(state.illegal_opcode), int(state.pc))
