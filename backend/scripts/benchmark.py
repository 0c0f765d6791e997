#!/usr/bin/env python3
"""Performance benchmark script.

Measures per-update cost of the incremental indicators and the full
strategy -> portfolio hot path.

Usage:
    python scripts/benchmark.py
"""

import gc
import statistics
import time

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np

from core.indicators import EMA, MACD, RSI, SMA, BollingerBands, MVar
from core.models import OhlcvRecord, SingleValueRecord
from core.strategy.crossover import CrossoverConfig, CrossoverStrategy

from backtest.portfolio import Portfolio


def timeit(func, iterations=20, warmup=2):
    """Time a function over many iterations.

    Returns:
        Tuple of (mean_time_us, std_time_us, min_time_us, max_time_us)
    """
    # Warmup
    for _ in range(warmup):
        func()

    # Force garbage collection before timing
    gc.collect()
    gc.disable()

    times = []
    for _ in range(iterations):
        start = time.perf_counter_ns()
        func()
        end = time.perf_counter_ns()
        times.append((end - start) / 1000)  # Convert to microseconds

    gc.enable()

    return (
        statistics.mean(times),
        statistics.stdev(times) if len(times) > 1 else 0,
        min(times),
        max(times),
    )


def make_prices(n: int = 10_000) -> list[float]:
    rng = np.random.default_rng(0)
    return [float(v) for v in 100.0 + np.cumsum(rng.normal(0.0, 1.0, size=n))]


def benchmark_indicators(prices: list[float]):
    """Benchmark one pass of each indicator over the price series."""
    print("\n" + "=" * 60)
    print("INDICATOR UPDATE BENCHMARK")
    print("=" * 60)

    bars = [
        OhlcvRecord(timestamp=i, open=o, high=max(o, c), low=min(o, c), close=c, volume=1.0)
        for i, (o, c) in enumerate(zip(prices, prices[1:]))
    ]

    cases = [
        ("SMA(50)", lambda: SMA(50), prices),
        ("EMA(50)", lambda: EMA(50), prices),
        ("MVar(50)", lambda: MVar(50), prices),
        ("Bollinger(20)", lambda: BollingerBands(20), prices),
        ("MACD(12,26,9)", lambda: MACD(12, 26, 9), prices),
        ("RSI(14)", lambda: RSI(14), bars),
    ]

    print(f"\n{'Indicator':<20} {'Per update (μs)':<16} {'Stdev (μs)':<12}")
    print("-" * 48)
    for name, factory, series in cases:
        def run():
            indicator = factory()
            for value in series:
                indicator.update(value)

        mean_us, std_us, _, _ = timeit(run)
        print(f"{name:<20} {mean_us / len(series):<16.3f} {std_us / len(series):<12.3f}")


def benchmark_pipeline(prices: list[float]):
    """Benchmark strategy + portfolio per record."""
    print("\n" + "=" * 60)
    print("STRATEGY + PORTFOLIO BENCHMARK")
    print("=" * 60)

    records = [SingleValueRecord(timestamp=i * 60, value=p) for i, p in enumerate(prices)]

    def run():
        strategy = CrossoverStrategy(CrossoverConfig(short_period=10, long_period=40))
        portfolio = Portfolio()
        for record in records:
            portfolio.update(strategy.update(record))

    mean_us, _, min_us, _ = timeit(run, iterations=10)
    print(f"\n{'Records':<20} {len(records):,}")
    print(f"{'Per record (μs)':<20} {mean_us / len(records):.3f}")
    print(f"{'Best pass (ms)':<20} {min_us / 1000:.1f}")


if __name__ == "__main__":
    prices = make_prices()
    benchmark_indicators(prices)
    benchmark_pipeline(prices)
    print()
