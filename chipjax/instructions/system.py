"""CHIP-8 system instructions (0x0xxx)."""

import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import STAY, NEXT
from chipjax.instructions.base import advance
from chipjax.stack import pop


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction):
    """00E0 - Clear display."""
    state = state.replace(
        display=jnp.zeros_like(state.display),
        redraw=jnp.ones((), dtype=jnp.bool_),
    )
    return state, advance(NEXT)


def execute_return(state: MachineState, instruction: DecodedInstruction):
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address), advance(STAY)


def execute_system_instruction(state: MachineState, instruction: DecodedInstruction):
    """Dispatch system instructions.

    Only 00E0 and 00EE reach this point, anything else in the 0NNN range
    has already been rejected as illegal.
    """
    return jax.lax.cond(
        instruction.raw == 0x00E0,
        execute_clear_screen,
        execute_return,
        state, instruction
    )
