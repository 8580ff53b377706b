"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipjax.config import Dialect, WrapMode
from chipjax.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class MachineState(PyTreeNode):
    """Main CHIP-8 machine state.

    The display is indexed ``[x, y]``. ``redraw`` and ``faulted`` describe the
    most recent cycle only; ``illegal_opcode`` keeps the word that caused the
    last fault. ``dialect`` and ``wrap_mode`` are static, so changing them
    recompiles jitted code instead of branching at runtime.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    redraw: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    powered: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    faulted: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    illegal_opcode: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    dialect: Dialect = field(pytree_node=False, default=Dialect.SCHIP)
    wrap_mode: WrapMode = field(pytree_node=False, default=WrapMode.WRAP)


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    dialect: Dialect = Dialect.SCHIP,
    wrap_mode: WrapMode = WrapMode.WRAP,
) -> MachineState:
    """Create initial machine state with font data loaded."""
    state = MachineState(rng, dialect=Dialect(dialect), wrap_mode=WrapMode(wrap_mode))
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def reset(state: MachineState) -> MachineState:
    """Power cycle the machine.

    Everything except the configuration and the random key goes back to its
    power-on value, font included. The machine is left unpowered until a ROM
    is loaded.
    """
    return create_state(state.rng, dialect=state.dialect, wrap_mode=state.wrap_mode)
