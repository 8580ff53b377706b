"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import NEXT
from chipjax.instructions.base import advance, set_register


def execute_set(state: MachineState, instruction: DecodedInstruction):
    """6XNN - Set VX = NN."""
    return state.replace(V=set_register(state.V, instruction.x, instruction.nn)), advance(NEXT)


def execute_add(state: MachineState, instruction: DecodedInstruction):
    """7XNN - Add NN to VX, wrapping at 256. VF is not touched."""
    total = state.V[instruction.x] + jnp.astype(instruction.nn, jnp.uint8)
    return state.replace(V=set_register(state.V, instruction.x, total)), advance(NEXT)


def execute_set_index(state: MachineState, instruction: DecodedInstruction):
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16)), advance(NEXT)


def execute_random(state: MachineState, instruction: DecodedInstruction):
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    value = jnp.astype(random_value, jnp.uint8) & jnp.astype(instruction.nn, jnp.uint8)
    return state.replace(V=set_register(state.V, instruction.x, value), rng=key), advance(NEXT)
