"""Console logging utilities for chip8vm.

A small coloured console logger shared by the machine core and the host
front-end, plus a tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Callable, Optional

from tqdm import tqdm


class ConsoleLogger:
    """Prints levelled, optionally coloured lines tagged with elapsed time and name.

    Machine warnings (unknown opcodes) and host messages both go through the
    shared instance returned by :func:`get_logger`.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        if log_level.upper() not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )
        self.log_level = log_level.upper()

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


_logger = ConsoleLogger()


def get_logger() -> ConsoleLogger:
    """Return the package-wide logger."""
    return _logger


def set_log_level(log_level: str):
    """Set the level of the package-wide logger."""
    _logger.set_level(log_level)


def run_with_progress(
    step_fn: Callable[[int], None],
    n: int,
    desc: str = "Running",
    print_rate: Optional[int] = None,
    **tqdm_kwargs,
):
    """Call ``step_fn(i)`` for ``i`` in ``range(n)`` behind a tqdm bar.

    The bar is refreshed every ``print_rate`` steps (default: n // 100).
    """
    if print_rate is None:
        print_rate = max(1, n // 100)

    with tqdm(total=n, desc=desc, unit="step", **tqdm_kwargs) as bar:
        pending = 0
        for i in range(n):
            step_fn(i)
            pending += 1
            if pending >= print_rate:
                bar.update(pending)
                pending = 0
        if pending:
            bar.update(pending)
