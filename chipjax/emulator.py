"""Main CHIP-8 execution engine."""

from functools import partial
from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState, reset
from chipjax.decode import DecodedInstruction, decode, is_legal
from chipjax.constants import ADDRESS_MASK, PROGRAM_START
from chipjax.instructions.base import Handler
from chipjax.instructions.system import execute_system_instruction
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import execute_misc_instruction
from chipjax.logging import scan_with_progress

HANDLERS: list[Handler] = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def _dispatch(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    state, pc_advance = jax.lax.switch(instruction.opcode, HANDLERS, state, instruction)
    return state.replace(pc=state.pc + pc_advance)


def _fault(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    return state.replace(faulted=jnp.ones((), dtype=jnp.bool_), illegal_opcode=instruction.raw)


def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction and advance the PC past it.

    An undefined instruction word leaves the machine untouched apart from
    ``faulted`` and ``illegal_opcode``.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.cond(
        is_legal(decoded_instruction),
        _dispatch,
        _fault,
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: MachineState) -> jnp.uint16:
    """Fetch the instruction word at the PC."""
    return _pack_u16(
        state.memory[state.pc & ADDRESS_MASK],
        state.memory[(state.pc + 1) & ADDRESS_MASK],
    )


def tick_timers(state: MachineState) -> MachineState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def step(state: MachineState) -> MachineState:
    """Run one fetch-decode-execute cycle.

    Clears the per-cycle flags, executes the word at the PC and ticks the
    timers. A faulted cycle leaves PC and timers alone, so stepping again
    faults on the same word.
    """
    state = state.replace(
        redraw=jnp.zeros((), dtype=jnp.bool_),
        faulted=jnp.zeros((), dtype=jnp.bool_),
    )
    state = execute(state, fetch(state))
    return jax.lax.cond(state.faulted, lambda s: s, tick_timers, state)


def _run_cycle(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: MachineState, n: int) -> MachineState:
    """Run n cycles in a single compiled loop."""
    state, _ = jax.lax.scan(_run_cycle, state, length=n)
    return state


@partial(jax.jit, static_argnames=("n", "print_rate"))
def run_cycles_with_progress(
    state: MachineState, n: int, print_rate: Optional[int] = None
) -> MachineState:
    """Run n cycles like run_cycles while reporting progress with tqdm.

    Compiled once per n and print_rate, the bar is recreated on every call.
    """
    @scan_with_progress(n, print_rate=print_rate, desc=f"Running ({n:,} cycles)")
    def _cycle(state, iter_num):
        return step(state), None

    state, _ = jax.lax.scan(_cycle, state, jnp.arange(n))
    return state


def load_rom(state: MachineState, rom: bytes) -> MachineState:
    """Power cycle the machine and load ROM data at 0x200.

    The ROM must fit in the 3584 bytes above 0x200, larger images are
    rejected by the slice update rather than truncated.
    """
    state = reset(state)
    if len(rom):
        rom_array = jnp.array(list(rom), dtype=jnp.uint8)
        new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(rom_array)
        state = state.replace(memory=new_memory)
    return state.replace(powered=jnp.ones((), dtype=jnp.bool_))


def read_rom(filename: str) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()


def load_rom_file(state: MachineState, filename: str) -> MachineState:
    """Load a ROM file into CHIP-8 memory starting at 0x200."""
    return load_rom(state, read_rom(filename))
