"""Console output helpers: plain flushed lines, banners and step timers."""

from __future__ import annotations

import sys
import time


def log(msg: str) -> None:
    """Print a message with immediate flush."""
    print(msg, flush=True)


def warn(msg: str) -> None:
    """Print a ``[WARN]`` line to stderr."""
    print(f"[WARN] {msg}", file=sys.stderr, flush=True)


def banner(msg: str) -> None:
    """Print a section banner."""
    log("\n" + "=" * 60)
    log(msg)
    log("=" * 60)


class StepTimer:
    """Context manager that logs how long a labeled step took."""

    def __init__(self, label: str, *, quiet: bool = False) -> None:
        self.label = label
        self.quiet = quiet
        self.elapsed = 0.0
        self._t0 = 0.0

    def __enter__(self) -> StepTimer:
        self._t0 = time.perf_counter()
        if not self.quiet:
            log(f"[..] {self.label}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        self.elapsed = time.perf_counter() - self._t0
        if exc is None:
            if not self.quiet:
                log(f"[OK] {self.label} ({self.elapsed:.2f}s)")
        else:
            warn(f"{self.label} failed after {self.elapsed:.2f}s: {exc}")
