#!/usr/bin/env python3
"""Generate synthetic CSV input for the backtester.

Prices follow a geometric random walk; OHLCV bars are built from
intra-bar samples of the same walk.

Usage:
    python scripts/generate_sample_data.py --kind single_value -n 500 > prices.csv
    python scripts/generate_sample_data.py --kind ohlcv --step 3600 -o bars.csv
    python scripts/generate_sample_data.py --kind tick --seed 7 -o ticks.csv
"""

import argparse
import sys

import numpy as np

HEADERS = {
    "single_value": "timestamp,value",
    "ohlcv": "timestamp,open,high,low,close,volume",
    "tick": "timestamp,price,volume,side",
}


def random_walk(rng: np.random.Generator, n: int, start: float, vol: float) -> np.ndarray:
    return start * np.exp(np.cumsum(rng.normal(0.0, vol, size=n)))


def generate_lines(kind: str, n: int, start_ts: int, step: int, seed: int) -> list[str]:
    rng = np.random.default_rng(seed)
    lines = [HEADERS[kind]]

    if kind == "single_value":
        prices = random_walk(rng, n, 100.0, 0.01)
        lines += [f"{start_ts + i * step},{p:.4f}" for i, p in enumerate(prices)]

    elif kind == "ohlcv":
        samples = random_walk(rng, n * 8, 100.0, 0.004).reshape(n, 8)
        volumes = rng.gamma(2.0, 50.0, size=n)
        for i, (bar, volume) in enumerate(zip(samples, volumes)):
            lines.append(
                f"{start_ts + i * step},{bar[0]:.4f},{bar.max():.4f},"
                f"{bar.min():.4f},{bar[-1]:.4f},{volume:.2f}"
            )

    else:
        prices = random_walk(rng, n, 100.0, 0.002)
        sizes = rng.exponential(0.5, size=n)
        sides = rng.integers(0, 3, size=n)
        lines += [
            f"{start_ts + i * step},{p:.4f},{q:.4f},{s}"
            for i, (p, q, s) in enumerate(zip(prices, sizes, sides))
        ]

    return lines


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic backtest CSV data")
    parser.add_argument("--kind", choices=sorted(HEADERS), default="single_value")
    parser.add_argument("-n", "--count", type=int, default=1000, help="Number of records")
    parser.add_argument("--start", type=int, default=1_700_000_000, help="First timestamp")
    parser.add_argument("--step", type=int, default=86_400, help="Timestamp step")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", "-o", type=str, default=None, help="Output path (default: stdout)")
    args = parser.parse_args()

    text = "\n".join(generate_lines(args.kind, args.count, args.start, args.step, args.seed)) + "\n"
    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
