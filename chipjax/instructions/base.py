"""Shared pieces of the instruction handlers.

Every handler takes ``(state, instruction)`` and returns the new state
together with how far the program counter moves afterwards.
"""

from typing import Callable

import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import NEXT, SKIP

Handler = Callable[[MachineState, DecodedInstruction], tuple[MachineState, jnp.ndarray]]


def advance(amount: int) -> jnp.ndarray:
    """PC advance as a uint16 scalar so every dispatch branch agrees on dtype."""
    return jnp.asarray(amount, dtype=jnp.uint16)


def advance_if(condition: jnp.ndarray) -> jnp.ndarray:
    """Skip the next instruction when condition holds."""
    return jnp.where(condition, advance(SKIP), advance(NEXT))


def set_register(V: jnp.ndarray, index, value) -> jnp.ndarray:
    """Write a register, truncating value to a byte."""
    return V.at[index].set(jnp.astype(value, jnp.uint8))
