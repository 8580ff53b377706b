"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.config import WrapMode
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, FLAG_REGISTER, NEXT, SCREEN_WIDTH, SCREEN_HEIGHT
from chipjax.instructions.base import advance, set_register

SPRITE_WIDTH = 8

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Boolean grid of the display pixels a DXYN would flip.

    The origin always wraps onto the screen. Pixels past the right or bottom
    edge wrap around in WRAP mode and are dropped in CLIP mode.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if state.wrap_mode is WrapMode.WRAP:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (
        (col_offset >= 0) & (col_offset < SPRITE_WIDTH)
        & (row_offset >= 0) & (row_offset < jnp.astype(instruction.n, jnp.int32))
    )

    row_offset = jnp.clip(row_offset, 0, 15)
    col_offset = jnp.clip(col_offset, 0, SPRITE_WIDTH - 1)
    addresses = (jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    bits = (sprite_bytes >> (SPRITE_WIDTH - 1 - col_offset)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: MachineState, instruction: DecodedInstruction):
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprite rows come from memory starting at I, most significant bit on the
    left. Each set bit XORs its pixel and VF reports whether any lit pixel
    went dark.
    """
    sprite = sprite_mask(state, instruction)
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=set_register(state.V, FLAG_REGISTER, collision),
        redraw=jnp.ones((), dtype=jnp.bool_),
    ), advance(NEXT)
