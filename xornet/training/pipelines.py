"""Pipeline assembly: presets, topology parsing and multi-network runs."""

from __future__ import annotations

import json
import operator
import warnings
from copy import deepcopy
from functools import reduce
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Tuple

import numpy as np

from ..core.network import DEFAULT_LEARNING_RATE, create_network
from ..core.types import RunResult
from ..reporting.console import ConsoleReporter, print_stagnation
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .controller import evaluate, run_epoch_set, train_until_success
from .examples import check_examples, truth_table

DEFAULT_TOPOLOGY = (2, 2, 1)

MODES = ("fixed", "until_success")

_TARGETS: Dict[str, Callable[..., int]] = {
    "xor": lambda *bits: reduce(operator.xor, bits, 0),
    "xnor": lambda *bits: 1 - reduce(operator.xor, bits, 0),
    "and": lambda *bits: int(all(bits)),
    "nand": lambda *bits: int(not all(bits)),
    "or": lambda *bits: int(any(bits)),
    "nor": lambda *bits: int(not any(bits)),
}

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-fixed": {
        "data": {"target": "xor"},
        "model": {"topology": "2-2-1", "learning_rate": DEFAULT_LEARNING_RATE},
        "train": {
            "mode": "fixed",
            "iterations": 131072,
            "print_every": 1024,
            "networks": 1,
            "seed": None,
            "enable_plots": False,
        },
    },
    "xor-until-success": {
        "data": {"target": "xor"},
        "model": {"topology": "2-2-1", "learning_rate": DEFAULT_LEARNING_RATE},
        "train": {
            "mode": "until_success",
            "print_every": 1024,
            "networks": 1,
            "seed": None,
            "success_threshold": 0.9,
            "error_threshold": 0.01,
            "stagnation_window": 10000,
            "improvement_threshold": 0.001,
            "enable_plots": False,
        },
    },
    "xor-smoke": {
        "data": {"target": "xor"},
        "model": {"topology": "2-2-1", "learning_rate": DEFAULT_LEARNING_RATE},
        "train": {
            "mode": "fixed",
            "iterations": 64,
            "print_every": 16,
            "networks": 2,
            "seed": 7,
            "enable_plots": False,
        },
    },
}


def targets() -> list[str]:
    return sorted(_TARGETS)


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def parse_topology(config: str) -> Tuple[int, int, int]:
    """Parse an ``"inputs-hidden-outputs"`` string such as ``"2-2-1"``.

    Malformed strings fall back to the default 2-2-1 network with a warning.
    """

    pieces = str(config).split("-")
    if len(pieces) == 3:
        try:
            dims = tuple(int(p) for p in pieces)
        except ValueError:
            dims = ()
        if len(dims) == 3 and all(d >= 1 for d in dims):
            return dims  # type: ignore[return-value]
    warnings.warn(
        f"Invalid network configuration {config!r}; using "
        f"{'-'.join(str(d) for d in DEFAULT_TOPOLOGY)}",
        RuntimeWarning,
        stacklevel=2,
    )
    return DEFAULT_TOPOLOGY


def build_examples(target: str, input_count: int):
    try:
        fn = _TARGETS[target]
    except KeyError as exc:
        available = ", ".join(sorted(_TARGETS))
        raise KeyError(f"Unknown target {target!r}. Available targets: {available}") from exc
    return truth_table(input_count, fn)


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config.get("data", {}))
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config.get("train", {}))

    mode = str(train_cfg.get("mode", "fixed"))
    if mode not in MODES:
        raise ValueError(f"mode must be one of {set(MODES)}")

    dims = parse_topology(str(model_cfg.get("topology", "2-2-1")))
    topology = "-".join(str(d) for d in dims)
    examples = build_examples(str(data_cfg.get("target", "xor")), dims[0])
    check_examples(examples, dims[0], dims[2])

    learning_rate = float(model_cfg.get("learning_rate", DEFAULT_LEARNING_RATE))
    hidden_credit = str(model_cfg.get("hidden_credit", "post_update"))
    networks = max(1, int(train_cfg.get("networks", 1)))
    print_every = int(train_cfg.get("print_every", 0))
    iterations = int(train_cfg.get("iterations", 131072))
    seed = train_cfg.get("seed")
    quiet = bool(train_cfg.get("quiet", False))
    children = np.random.SeedSequence(None if seed is None else int(seed)).spawn(networks)

    run_dir = Path(train_cfg["run_dir"]) if train_cfg.get("run_dir") else None
    metrics_path = None
    plots = None
    if run_dir is not None:
        run_dir.mkdir(parents=True, exist_ok=True)
        metrics_path = run_dir / "metrics.jsonl"
        metrics_path.write_text("")
        csv_path = run_dir / "metrics.csv"
        if csv_path.exists():
            csv_path.unlink()
        plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    success_total = 0.0
    converged = 0
    converged_iterations = 0
    for n, child in enumerate(children):
        net = create_network(*dims, np.random.default_rng(child), hidden_credit=hidden_credit)
        net.set_learning_rate(learning_rate)
        hooks: List[object] = []
        console = None
        if not quiet:
            console = ConsoleReporter()
            hooks.append(console)
            print(f"{topology} initialised with learning rate {net.learning_rate}")
        if run_dir is not None:
            hooks.append(JsonlSink(metrics_path, network=n, seed=seed))
            hooks.append(CsvSink(run_dir / "metrics.csv", network=n))
            hooks.append(plots)

        if mode == "fixed":
            run_epoch_set(net, examples, iterations, print_every, hooks)
            success_total += evaluate(net, examples)
        else:
            outcome = train_until_success(
                net,
                examples,
                print_every,
                hooks,
                success_threshold=float(train_cfg.get("success_threshold", 0.9)),
                error_threshold=float(train_cfg.get("error_threshold", 0.01)),
                stagnation_window=int(train_cfg.get("stagnation_window", 10000)),
                improvement_threshold=float(train_cfg.get("improvement_threshold", 0.001)),
            )
            if outcome.converged:
                converged += 1
                converged_iterations += outcome.iterations
                if not quiet:
                    print(f"Network fully trained after {outcome.iterations} iterations")
            elif not quiet:
                print_stagnation(outcome)
        if console is not None:
            console.close()

    if mode == "fixed":
        success_rate = success_total / networks
        mean_iterations = float(iterations)
        if not quiet:
            print(
                f"Average success rate for {topology} network with a = {learning_rate:0.3f} "
                f"over {int(mean_iterations)} iterations: {success_rate:3.5f}"
            )
    else:
        success_rate = converged / networks
        mean_iterations = converged_iterations / converged if converged else 0.0
        if not quiet:
            print(
                f"{topology}: mean success rate {success_rate:5.3f} with mean training "
                f"time {int(mean_iterations)} generations"
            )

    summary_path = ""
    if run_dir is not None:
        if plots is not None:
            plots.close()
        run_info = {
            "mode": mode,
            "topology": topology,
            "networks": networks,
            "success_rate": success_rate,
            "mean_iterations": mean_iterations,
        }
        summary_path = write_summary(
            metrics_path,
            run_dir / "summary.json",
            tail=int(train_cfg.get("summary_tail", 32)),
            extra=run_info,
        )
        (run_dir / "config.json").write_text(json.dumps(config, indent=2, default=str))

    return RunResult(
        mode=mode,
        topology=topology,
        networks=networks,
        success_rate=success_rate,
        mean_iterations=mean_iterations,
        metrics_path=str(metrics_path) if metrics_path is not None else "",
        summary_path=summary_path,
    )


__all__ = [
    "DEFAULT_TOPOLOGY",
    "MODES",
    "build_examples",
    "load_preset",
    "parse_topology",
    "presets",
    "run_pipeline",
    "targets",
]
