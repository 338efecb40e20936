"""Command line entry point for XorNet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from xornet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "mode": result.mode,
        "topology": result.topology,
        "networks": result.networks,
        "success_rate": result.success_rate,
        "mean_iterations": result.mean_iterations,
    }
    if result.metrics_path:
        payload["metrics"] = result.metrics_path
    if result.summary_path:
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-fixed",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "-c", "--topology", help="Network configuration such as 2-2-1"
    )
    parser.add_argument(
        "-i", "--iterations", type=int, help="Number of training iterations"
    )
    parser.add_argument(
        "-l", "--learning-rate", type=float, help="Learning rate, strictly between 0 and 1"
    )
    parser.add_argument(
        "-n", "--networks", type=int, help="Number of neural networks to train"
    )
    parser.add_argument(
        "-p", "--print-every", type=int, help="Display step (0 disables snapshots)"
    )
    parser.add_argument(
        "-t",
        "--until-success",
        action="store_true",
        help="Train each network until it is successful or stagnates",
    )
    parser.add_argument(
        "--target",
        choices=pipelines.targets(),
        help="Boolean function to learn",
    )
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory for metrics and summaries")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress progress output"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    preset = args.preset
    if args.until_success and preset == "xor-fixed":
        preset = "xor-until-success"
    config = json.loads(json.dumps(pipelines.load_preset(preset)))

    if args.config:
        config = _merge(config, _load_override(args.config))

    model_cfg = config.setdefault("model", {})
    train_cfg = config.setdefault("train", {})
    if args.until_success:
        train_cfg["mode"] = "until_success"
    if args.topology is not None:
        model_cfg["topology"] = args.topology
    if args.learning_rate is not None:
        model_cfg["learning_rate"] = args.learning_rate
    if args.target is not None:
        config.setdefault("data", {})["target"] = args.target
    if args.iterations is not None:
        train_cfg["iterations"] = int(args.iterations)
    if args.networks is not None:
        train_cfg["networks"] = int(args.networks)
    if args.print_every is not None:
        train_cfg["print_every"] = int(args.print_every)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.quiet:
        train_cfg["quiet"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
