"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List


class PlotAdapter:
    """Collect per-iteration error and optionally emit a matplotlib figure."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False, name: str = "loss.png"):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.name = name
        self._errors: Dict[int, List[float]] = {}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_step(self, iteration: int, snapshot: str, error: float) -> None:
        if not self.enable_plots:
            return
        self._errors.setdefault(int(iteration), []).append(float(error))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._errors:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        iterations = sorted(self._errors)
        means = [sum(self._errors[i]) / len(self._errors[i]) for i in iterations]
        fig, ax = plt.subplots()
        ax.plot(iterations, means)
        ax.set_xlabel("Iteration")
        ax.set_ylabel("Mean SOS error")
        ax.set_title("Training Curve")
        plot_path = self.run_dir / self.name
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    __call__ = on_step
