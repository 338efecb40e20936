"""Console progress reporting."""

from __future__ import annotations

import sys
from typing import TextIO

RULE = "-" * 72


class ConsoleReporter:
    """Print network snapshots as training progresses."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self._iteration: int | None = None

    def _print(self, text: str) -> None:
        print(text, file=self.stream or sys.stdout)

    def on_step(self, iteration: int, snapshot: str, error: float) -> None:
        if iteration != self._iteration:
            if self._iteration is not None:
                self._print(RULE)
            self._print("Neural network snapshot:")
            self._iteration = iteration
        self._print(f"{iteration:5d}> {snapshot} | err: {error:2.3f}")

    def close(self) -> None:
        if self._iteration is not None:
            self._print(RULE)
            self._iteration = None

    __call__ = on_step


def print_stagnation(outcome, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    print(
        "*** Stagnation detected: no change since",
        outcome.last_improvement,
        "with current generation",
        outcome.iterations - 1,
        file=out,
    )
    print(
        f"{outcome.iterations - 1:10d}> SUCC: {outcome.success_rate:3.2f}\t ERR: {outcome.error:8.5f}",
        file=out,
    )


__all__ = ["ConsoleReporter", "RULE", "print_stagnation"]
