"""Metrics sinks for training progress."""

from __future__ import annotations

import csv
import json
from pathlib import Path


class JsonlSink:
    """Append-only JSONL writer for training snapshots."""

    def __init__(
        self,
        path: str | Path,
        *,
        network: int = 0,
        seed: int | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.network = network
        self.seed = seed

    def on_step(self, iteration: int, snapshot: str, error: float) -> None:
        record = {
            "iteration": int(iteration),
            "network": self.network,
            "seed": self.seed,
            "state": snapshot.strip(),
            "loss": float(error),
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_step


class CsvSink:
    """Write training snapshots to CSV with a stable schema."""

    fieldnames = ("iteration", "network", "loss", "state")

    def __init__(self, path: str | Path, *, network: int = 0) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.network = network

    def on_step(self, iteration: int, snapshot: str, error: float) -> None:
        row = {
            "iteration": int(iteration),
            "network": self.network,
            "loss": float(error),
            "state": snapshot.strip(),
        }
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)

    __call__ = on_step


__all__ = ["CsvSink", "JsonlSink"]
