"""Generate charts from ``ndrange.modes.benchmark`` output.

Reads log files (or plain JSON files) containing a ``BENCHMARK_JSON=`` line and
produces PNG charts comparing the traversal strategies.

Usage:
    python -m ndrange.modes.benchmark --workers 1,2,4,8 > benchmark_results/run.log
    python scripts/plot_benchmark_comparison.py benchmark_results/run.log \
        --output-dir benchmark_results/figures
"""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

_PREFIX = "BENCHMARK_JSON="


def _load_results(path: str) -> dict:
    with open(path) as f:
        text = f.read()
    for line in text.splitlines():
        if line.startswith(_PREFIX):
            return json.loads(line[len(_PREFIX) :])
    return json.loads(text)


def _extract(rows: list[dict], mode: str) -> dict:
    """Extract worker counts, throughput and avg time for a given mode."""
    filtered = sorted((r for r in rows if r["mode"] == mode), key=lambda r: r["workers"])
    return {
        "workers": [int(r["workers"]) for r in filtered],
        "throughput": [float(r["throughput_pps"]) for r in filtered],
        "avg_time": [float(r["avg_time_s"]) for r in filtered],
    }


def _label(results: dict, path: str) -> str:
    return f"{Path(path).stem} ({results['positions']} positions)"


def plot_throughput(runs: list[tuple[str, dict]], output_dir: str) -> None:
    """Bar chart: throughput of every strategy, one bar group per run."""
    fig, ax = plt.subplots(figsize=(12, 6))

    labels = []
    values = []
    for title, results in runs:
        for row in results["results"]:
            suffix = f" x{row['workers']}" if row["mode"] == "bridge" else ""
            labels.append(f"{title}\n{row['mode']}{suffix}")
            values.append(float(row["throughput_pps"]))

    bars = ax.bar(range(len(values)), values, color="#4C72B0", edgecolor="black", linewidth=0.5)
    ax.set_ylabel("Throughput (positions/s)", fontsize=12)
    ax.set_title("Traversal throughput by strategy", fontsize=13)
    ax.set_xticks(list(range(len(labels))))
    ax.set_xticklabels(labels, fontsize=8)
    ax.grid(axis="y", alpha=0.3)

    for bar in bars:
        h = bar.get_height()
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            h,
            f"{h:.0f}",
            ha="center",
            va="bottom",
            fontsize=8,
        )

    plt.tight_layout()
    path = os.path.join(output_dir, "throughput_comparison.png")
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved: {path}")


def plot_bridge_scaling(runs: list[tuple[str, dict]], output_dir: str) -> None:
    """Line chart: bridge speedup over its single-worker run."""
    fig, ax = plt.subplots(figsize=(10, 6))

    max_workers = 1
    for title, results in runs:
        bridge = _extract(results["results"], "bridge")
        if not bridge["throughput"]:
            continue
        base = bridge["throughput"][0] or 1.0
        speedup = [t / base for t in bridge["throughput"]]
        max_workers = max(max_workers, *bridge["workers"])
        ax.plot(bridge["workers"], speedup, "o-", label=title, linewidth=2, markersize=8)
        for w, s in zip(bridge["workers"], speedup):
            ax.annotate(
                f"{s:.2f}x",
                (w, s),
                textcoords="offset points",
                xytext=(0, 10),
                ha="center",
                fontsize=9,
            )

    ax.plot(
        [1, max_workers],
        [1, max_workers],
        "--",
        label="Ideal (linear)",
        color="gray",
        linewidth=1.5,
        alpha=0.7,
    )
    ax.set_xlabel("Workers", fontsize=12)
    ax.set_ylabel("Speedup (x)", fontsize=12)
    ax.set_title("Bridge scaling", fontsize=13)
    ax.legend(fontsize=11)
    ax.grid(alpha=0.3)

    plt.tight_layout()
    path = os.path.join(output_dir, "bridge_scaling.png")
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved: {path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Plot benchmark comparison charts")
    parser.add_argument("inputs", nargs="+", help="Benchmark logs or JSON files")
    parser.add_argument(
        "--output-dir",
        type=str,
        default="benchmark_results/figures",
    )
    args = parser.parse_args()

    Path(args.output_dir).mkdir(parents=True, exist_ok=True)

    runs = []
    for path in args.inputs:
        results = _load_results(path)
        runs.append((_label(results, path), results))

    plot_throughput(runs, args.output_dir)
    plot_bridge_scaling(runs, args.output_dir)
    print(f"\nAll charts saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
