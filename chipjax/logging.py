"""Console logging and scan progress reporting for chipjax.

``ConsoleLogger`` prints leveled lines to stdout for the machine facade and
the command line runner. ``scan_with_progress`` wraps the body of a
``jax.lax.scan`` so a tqdm bar advances from inside compiled code through
``io_callback``.
"""

import sys
import time
from typing import Callable, Optional

import jax
from jax.experimental import io_callback
from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Leveled console logger with optional colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.name = name
        self.log_level = level
        self.use_colors = use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def log(self, level: str, message: str):
        """Print message if level is at or above the logger's level."""
        level = level.upper()
        if LEVELS.index(level) < LEVELS.index(self.log_level):
            return

        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


def scan_with_progress(
    n: int,
    print_rate: Optional[int] = None,
    desc: Optional[str] = None,
    **tqdm_kwargs,
) -> Callable:
    """Decorate a scan body ``f(carry, iter_num)`` so it drives a tqdm bar.

    The scan must run over the iteration numbers ``0..n-1``. The bar opens on
    the first iteration, moves every ``print_rate`` iterations and closes
    after the last one. It is safe to call the compiled loop again, each run
    gets a fresh bar.
    """
    if print_rate is None:
        print_rate = min(n // 20, 50)
    print_rate = max(1, min(print_rate, n))
    remainder = n % print_rate
    bars = {}

    def _open():
        bars["bar"] = tqdm(total=n, desc=desc or f"Running ({n:,} steps)", unit="step", **tqdm_kwargs)

    def _update(count):
        bars["bar"].update(int(count))

    def _close():
        bars.pop("bar").close()

    def _when(condition, callback, *args):
        jax.lax.cond(
            condition,
            lambda: io_callback(callback, None, *args, ordered=True),
            lambda: None,
        )

    def decorator(body):
        def wrapped(carry, iter_num):
            _when(iter_num == 0, _open)
            _when((iter_num + 1) % print_rate == 0, _update, print_rate)
            if remainder:
                _when(iter_num == n - 1, _update, remainder)

            result = body(carry, iter_num)

            _when(iter_num == n - 1, _close)
            return result

        return wrapped

    return decorator
