"""CHIP-8 stack operations.

The slot index is the pointer modulo STACK_SIZE: more than 16 nested calls
overwrite the oldest return addresses and a return on an empty stack reads
the last slot. Neither case is reported.
"""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK, STACK_SIZE
from chipjax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer % STACK_SIZE].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = stack.pointer - 1
    slot = new_pointer % STACK_SIZE
    popped_address = stack.data[slot]
    new_data = stack.data.at[slot].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
