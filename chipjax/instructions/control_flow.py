"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, STAY, NEXT
from chipjax.instructions.base import advance, advance_if
from chipjax.stack import push


def execute_jump(state: MachineState, instruction: DecodedInstruction):
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16)), advance(STAY)


def execute_call(state: MachineState, instruction: DecodedInstruction):
    """2NNN - Call subroutine at NNN.

    The pushed address is the instruction after the call, so 00EE does not
    need to advance.
    """
    state = state.replace(stack=push(state.stack, state.pc + NEXT))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction: DecodedInstruction):
        return state, advance_if(condition_fn(state, instruction))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction):
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16)), advance(STAY)


def _key_pressed(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    # Keys only go up to F, higher register values alias onto them
    return state.keypad[state.V[instruction.x] & 0xF]


def execute_skip_if_key(state: MachineState, instruction: DecodedInstruction):
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    is_not_instruction = (instruction.nn == 0xA1)
    condition = _key_pressed(state, instruction) ^ is_not_instruction
    return state, advance_if(condition)
