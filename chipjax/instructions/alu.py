"""CHIP-8 ALU operations (8xxx)."""

import jax.lax
import jax.numpy as jnp
from chipjax.config import Dialect
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FLAG_REGISTER, NEXT
from chipjax.instructions.base import advance, set_register


def _no_flag():
    return jnp.zeros((), dtype=jnp.uint8)


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, _no_flag()


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _no_flag()


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _no_flag()


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _no_flag()


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.uint16) + jnp.astype(vy, jnp.uint16)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    return vx - vy, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    return vy - vx, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return vx << 1, (vx >> 7) & 1


# Position in the switch below for each low nibble. Arithmetic writes VF after
# the result, the shifts write VF first.
ALU_INDEX = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 0, 0, 0, 0, 0, 0, 8, 0], dtype=jnp.int32)
ALU_FLAG_LAST = jnp.array([False, False, False, False, True, True, False, True, False])
ALU_RESULT_LAST = jnp.array([False, False, False, False, False, False, True, False, True])


def execute_alu_operation(state: MachineState, instruction: DecodedInstruction):
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    # COSMAC shifts VY into VX, SCHIP shifts VX in place
    def _alu_shift_left(vx, vy):
        if state.dialect is Dialect.COSMAC:
            vx = vy
        return alu_shift_left(vx, vy)

    def _alu_shift_right(vx, vy):
        if state.dialect is Dialect.COSMAC:
            vx = vy
        return alu_shift_right(vx, vy)

    index = ALU_INDEX[instruction.n]
    result, vf = jax.lax.switch(
        index,
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, _alu_shift_right, alu_sub_yx, _alu_shift_left],
        vx, vy
    )

    # Whichever is written last wins when X is F
    result_only = set_register(state.V, instruction.x, result)
    flag_last = set_register(result_only, FLAG_REGISTER, vf)
    result_last = set_register(set_register(state.V, FLAG_REGISTER, vf), instruction.x, result)
    new_V = jnp.select(
        [ALU_FLAG_LAST[index], ALU_RESULT_LAST[index]],
        [flag_last, result_last],
        result_only,
    )
    return state.replace(V=new_V), advance(NEXT)
