"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.lax
import jax.numpy as jnp
import numpy as np
from chipjax.config import Dialect
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction, MISC_OPCODES
from chipjax.constants import (
    ADDRESS_MASK, FLAG_REGISTER, FONT_START, FONT_GLYPH_SIZE, NUM_REGISTERS, STAY, NEXT,
)
from chipjax.instructions.base import advance, set_register


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction):
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=set_register(state.V, instruction.x, state.delay_timer)), advance(NEXT)


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction):
    """FX0A - Wait for key press.

    Nothing blocks here: while no key is down the PC stays put and the host
    has to keep stepping with fresh key input. Registers are left alone.
    """
    return state, jnp.where(jnp.any(state.keypad), advance(NEXT), advance(STAY))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction):
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x]), advance(NEXT)


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction):
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x]), advance(NEXT)


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction):
    """FX1E - Add VX to I register, VF flags a result past 0xFFF."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    overflow_flag = new_i > ADDRESS_MASK
    return state.replace(
        I=new_i,
        V=set_register(state.V, FLAG_REGISTER, overflow_flag)
    ), advance(NEXT)


def execute_font_character(state: MachineState, instruction: DecodedInstruction):
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16)), advance(NEXT)


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction):
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (state.I + jnp.arange(3, dtype=jnp.uint16)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits)), advance(NEXT)


def _register_window(state: MachineState, instruction: DecodedInstruction):
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = (state.I + jnp.arange(NUM_REGISTERS, dtype=jnp.uint16)) & ADDRESS_MASK
    return register_mask, addresses


def _advance_index(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    # COSMAC leaves I just past the last transferred byte
    if state.dialect is Dialect.COSMAC:
        return state.I + jnp.astype(instruction.x, jnp.uint16) + 1
    return state.I


def execute_store_registers(state: MachineState, instruction: DecodedInstruction):
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask, addresses = _register_window(state, instruction)
    new_values = jnp.where(register_mask, state.V, state.memory[addresses])
    new_memory = state.memory.at[addresses].set(new_values)
    return state.replace(memory=new_memory, I=_advance_index(state, instruction)), advance(NEXT)


def execute_load_registers(state: MachineState, instruction: DecodedInstruction):
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask, addresses = _register_window(state, instruction)
    new_V = jnp.where(register_mask, state.memory[addresses], state.V)
    return state.replace(V=new_V, I=_advance_index(state, instruction)), advance(NEXT)


MISC_INDEX = np.zeros(256, dtype=np.int32)
MISC_INDEX[list(MISC_OPCODES)] = np.arange(len(MISC_OPCODES))


def execute_misc_instruction(state: MachineState, instruction: DecodedInstruction):
    """Dispatch misc instructions on their low byte."""
    return jax.lax.switch(
        jnp.asarray(MISC_INDEX)[instruction.nn],
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
        ],
        state, instruction
    )
