"""CLI entry point for the backtesting system.

Reads records from a CSV file (or stdin), replays them through a
registered strategy into a simulated portfolio and prints a report.

Usage:
    python -m backtest --strategy crossover --input prices.csv
    python -m backtest --strategy rsi --input bars.csv --params period=9 oversold=25
    cat prices.csv | python -m backtest --strategy macd --input - --fee 0.001 -v
    python -m backtest --list
"""

import argparse
import logging
import os
import sys

# Add backend to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from core.strategy import describe_strategies

from backtest.config import get_backtest_settings
from backtest.report import ReportFormatter
from backtest.runner import BacktestConfig, BacktestRunner


def parse_param(item: str) -> tuple[str, str]:
    """Parse KEY=VALUE; values stay strings and are coerced by the config model."""
    key, sep, value = item.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(
            f"Invalid parameter: {item} (expected key=value)"
        )
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m backtest",
        description="Backtest a signal strategy against a CSV record series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m backtest --strategy crossover --input prices.csv
  python -m backtest --strategy crossover --input prices.csv --params short_period=5 long_period=20 average=ema
  python -m backtest --strategy rsi --input bars.csv --stop-loss 0.1 --take-profit 0.2
  cat ticks.csv | python -m backtest --strategy macd --input - --no-header --ms -v
  python -m backtest --list
        """,
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List registered strategies and exit",
    )

    # Run parameters
    parser.add_argument(
        "--strategy", "-s",
        type=str,
        default=None,
        help="Registered strategy name (see --list)",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        default="-",
        help="CSV input path, '-' for stdin (default: -)",
    )
    parser.add_argument(
        "--no-header",
        action="store_true",
        help="Input has no header line",
    )
    parser.add_argument(
        "--params", "-p",
        type=parse_param,
        nargs="*",
        default=[],
        metavar="KEY=VALUE",
        help="Strategy parameters",
    )

    # Portfolio parameters (defaults from BACKTEST_* settings)
    parser.add_argument("--cash", type=float, default=None, help="Initial cash")
    parser.add_argument(
        "--fee",
        type=float,
        default=None,
        help="Transaction cost as a fraction of notional (0.001 = 0.1%%)",
    )
    parser.add_argument(
        "--stop-loss",
        type=float,
        default=None,
        help="Stop-loss fraction below acquisition price",
    )
    parser.add_argument(
        "--take-profit",
        type=float,
        default=None,
        help="Take-profit fraction above acquisition price",
    )
    parser.add_argument(
        "--ms",
        action="store_true",
        help="Timestamps are epoch milliseconds",
    )

    # Output
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print portfolio state after every executed signal",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging",
    )
    return parser


def cmd_list_strategies() -> None:
    """List registered strategies with their data kind and defaults."""
    print(f"\n{'Name':<12} {'Version':<9} {'Data':<14} Defaults")
    print("-" * 80)
    for info in describe_strategies():
        defaults = ", ".join(f"{k}={v}" for k, v in info.defaults.items())
        print(f"{info.name:<12} {info.version:<9} {info.data_kind.value:<14} {defaults}")
    print()


def cmd_run_backtest(args: argparse.Namespace) -> None:
    """Run a backtest."""
    settings = get_backtest_settings()

    portfolio = settings.portfolio_config(
        initial_cash=args.cash,
        tx_cost_pct=args.fee,
        stop_loss=args.stop_loss,
        take_profit=args.take_profit,
        timestamp_unit_seconds=0.001 if args.ms else None,
    )
    config = BacktestConfig(
        strategy_name=args.strategy,
        input_path=args.input,
        strategy_params=dict(args.params),
        portfolio=portfolio,
        has_header=settings.has_header and not args.no_header,
        verbose=args.verbose,
    )

    result = BacktestRunner(config).run()

    ReportFormatter.print_console(result)

    if args.output:
        ReportFormatter.save_json(result, args.output)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.list:
        cmd_list_strategies()
        return 0

    if args.strategy is None:
        parser.print_usage(sys.stderr)
        print("Error: --strategy is required (see --list)", file=sys.stderr)
        return 2

    try:
        cmd_run_backtest(args)
    except (KeyError, ValueError, ValidationError) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        print(f"Error: {message}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
