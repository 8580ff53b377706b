"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, load_rom, Dialect, WrapMode


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def schip_state():
    """Provide a fresh state using SCHIP semantics."""
    return create_state(dialect=Dialect.SCHIP)


@pytest.fixture
def cosmac_state():
    """Provide a fresh state using COSMAC semantics."""
    return create_state(dialect=Dialect.COSMAC)


@pytest.fixture
def clip_state():
    """Provide a fresh state that clips sprites at the screen edges."""
    return create_state(wrap_mode=WrapMode.CLIP)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Assemble instruction words into ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def boot(*words, **kwargs):
    """Fresh powered state running the given instruction words."""
    return load_rom(create_state(**kwargs), program(*words))
