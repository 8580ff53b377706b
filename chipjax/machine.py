"""Stateful host-side facade over the functional machine.

The functional core never raises: faults are recorded in the state so that
``step`` stays jittable. ``Machine`` keeps the current state, feeds it key
input, and turns faults into ``IllegalOpcode`` exceptions.

Example:
    ```python
    from chipjax import Machine, Dialect

    machine = Machine(dialect=Dialect.COSMAC)
    machine.load_rom_file("roms/pong.ch8")
    while True:
        machine.set_keys(poll_keyboard())
        if machine.step():
            blit(machine.display)
    ```
"""

from typing import Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chipjax.config import Dialect, WrapMode
from chipjax.constants import MAX_ROM_SIZE, NUM_KEYS
from chipjax.emulator import step, run_cycles, run_cycles_with_progress, load_rom, read_rom
from chipjax.errors import MachineNotPowered, raise_for_fault, IllegalOpcode
from chipjax.logging import ConsoleLogger
from chipjax.state import MachineState, create_state, reset

_jit_step = jax.jit(step)


class Machine:
    """A CHIP-8 machine driven one cycle at a time by the host."""

    def __init__(
        self,
        dialect: Dialect = Dialect.SCHIP,
        wrap_mode: WrapMode = WrapMode.WRAP,
        seed: int = 0,
        logger: Optional[ConsoleLogger] = None,
    ):
        """
        Args:
            dialect: Interpreter dialect for 8XY6, 8XYE, FX55 and FX65
            wrap_mode: Whether sprites wrap around or are clipped at the screen edges
            seed: Seed of the generator behind CXNN
            logger: Logger for lifecycle events, a quiet one is created if omitted
        """
        self.logger = logger or ConsoleLogger(name="Machine", log_level="WARNING")
        self._state = create_state(jax.random.PRNGKey(seed), dialect=dialect, wrap_mode=wrap_mode)

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def dialect(self) -> Dialect:
        return self._state.dialect

    @property
    def wrap_mode(self) -> WrapMode:
        return self._state.wrap_mode

    @property
    def powered(self) -> bool:
        return bool(self._state.powered)

    def reset(self):
        """Power cycle the machine. A ROM must be loaded again before stepping."""
        self._state = reset(self._state)
        self.logger.debug("Machine reset")

    def load_rom(self, rom: bytes):
        """Reset the machine, copy rom to 0x200 and power it on."""
        if len(rom) > MAX_ROM_SIZE:
            raise ValueError(f"ROM is {len(rom)} bytes, at most {MAX_ROM_SIZE} fit above 0x200")
        self._state = load_rom(self._state, rom)
        self.logger.info(
            f"Loaded {len(rom)} byte ROM ({self.dialect.value}, {self.wrap_mode.value})"
        )

    def load_rom_file(self, filename: str):
        """Load a ROM image from disk."""
        self.load_rom(read_rom(filename))

    def _require_power(self):
        if not self.powered:
            raise MachineNotPowered("Must load a ROM before stepping the machine")

    def _check_fault(self):
        try:
            raise_for_fault(self._state)
        except IllegalOpcode as e:
            self.logger.error(str(e))
            raise

    def step(self) -> bool:
        """Run one cycle.

        Returns:
            Whether the display changed and should be redrawn

        Raises:
            MachineNotPowered: If no ROM has been loaded
            IllegalOpcode: If the word at the PC is not an instruction
        """
        self._require_power()
        self._state = _jit_step(self._state)
        self._check_fault()
        return self.redraw

    def run(self, cycles: int, progress: bool = False):
        """Run several cycles in one compiled loop.

        A fault part way through stops all progress at the faulting word, so
        the error raised afterwards points at it.
        """
        self._require_power()
        if progress:
            self._state = run_cycles_with_progress(self._state, cycles)
        else:
            self._state = run_cycles(self._state, cycles)
        self._check_fault()

    def _check_key(self, key: int):
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key must be in range 0-F, got {key}")

    def press(self, key: int):
        """Mark a hex key as held down."""
        self._check_key(key)
        self._state = self._state.replace(keypad=self._state.keypad.at[key].set(True))

    def release(self, key: int):
        """Mark a hex key as released."""
        self._check_key(key)
        self._state = self._state.replace(keypad=self._state.keypad.at[key].set(False))

    def set_keys(self, keys: Sequence[bool]):
        """Replace the whole key snapshot with 16 booleans indexed by key."""
        keypad = jnp.asarray(keys, dtype=jnp.bool_)
        if keypad.shape != (NUM_KEYS,):
            raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
        self._state = self._state.replace(keypad=keypad)

    @property
    def display(self) -> np.ndarray:
        """Pixel grid as a (64, 32) boolean array indexed [x, y]."""
        return np.array(self._state.display)

    @property
    def redraw(self) -> bool:
        return bool(self._state.redraw)

    @property
    def sound_active(self) -> bool:
        """Whether the host should currently be playing the tone."""
        return bool(self._state.sound_timer > 0)

    @property
    def pc(self) -> int:
        return int(self._state.pc)

    @property
    def registers(self) -> np.ndarray:
        return np.array(self._state.V)
