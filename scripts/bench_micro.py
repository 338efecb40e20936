"""Compare post-update and pre-update hidden credit on XOR over several seeds."""

from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path
from statistics import mean, pstdev

MODES = ["post_update", "pre_update"]


def _mu_sigma(vals):
    return mean(vals), (pstdev(vals) if len(vals) > 1 else 0.0)


def train_one(mode: str, seed: int, iterations: int, lr: float) -> dict:
    from xornet.core.network import create_network, make_rng
    from xornet.training.controller import evaluate, run_epoch_set
    from xornet.training.examples import xor_examples

    examples = xor_examples()
    net = create_network(2, 2, 1, make_rng(seed), hidden_credit=mode)
    net.set_learning_rate(lr)
    _, error = run_epoch_set(net, examples, iterations)
    return {"final_error": error, "final_success": evaluate(net, examples)}


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--iterations", type=int, default=2000)
    ap.add_argument("--lr", type=float, default=0.2)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)

    runs = []
    rows = []
    base_error = None
    for mode in MODES:
        mode_runs = [
            {"hidden_credit": mode, "seed": s, **train_one(mode, s, args.iterations, args.lr)}
            for s in args.seeds
        ]
        runs.extend(mode_runs)
        err_mu, err_sd = _mu_sigma([r["final_error"] for r in mode_runs])
        succ_mu, succ_sd = _mu_sigma([r["final_success"] for r in mode_runs])
        if base_error is None:
            base_error = err_mu
        rows.append((mode, err_mu, err_sd, succ_mu, succ_sd, err_mu - base_error))

    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    n = len(args.seeds)
    csv_path = out / "bench_micro.csv"
    md_lines = [
        "### Micro-Benchmark: hidden credit after vs before the weight update",
        "",
        f"- Seeds: `{args.seeds}`; Iterations: `{args.iterations}`; LR: `{args.lr}`",
        "",
        "| Credit | Final Error (μ±σ) | Success (μ±σ) | ΔError vs POST | Seeds | Iterations |",
        "|---|---:|---:|---:|---:|---:|",
    ]
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "hidden_credit",
                "seeds",
                "iterations",
                "final_error_mu",
                "final_error_sd",
                "final_success_mu",
                "final_success_sd",
                "delta_error_vs_post",
            ]
        )
        for mode, err_mu, err_sd, succ_mu, succ_sd, delta in rows:
            w.writerow(
                [mode, n, args.iterations]
                + [f"{v:.4f}" for v in (err_mu, err_sd, succ_mu, succ_sd, delta)]
            )
            label = mode.split("_")[0].upper()
            md_lines.append(
                f"| {label} | {err_mu:.4f} ± {err_sd:.4f} | {succ_mu:.4f} ± {succ_sd:.4f} | "
                f"{delta:+.4f} | {n} | {args.iterations} |"
            )

    md_path = out / "bench_micro.md"
    md_path.write_text("\n".join(md_lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
