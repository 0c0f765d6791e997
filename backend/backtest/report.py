"""Report formatting for backtest results.

Outputs results to console (formatted tables) and JSON files.
Figures that are unavailable (short history, no valid price) show as
``n/a`` on the console and ``null`` in JSON.
"""

from __future__ import annotations

import json
import math
from enum import Enum

from backtest.portfolio import format_num, format_pct
from backtest.runner import BacktestResult


class ReportEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def _num(value: float | None, digits: int = 6) -> float | None:
    """Round for JSON; NaN and None become null."""
    if value is None or math.isnan(value):
        return None
    return round(value, digits)


def _money(value: float | None) -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value:,.2f}"


class ReportFormatter:
    """Format backtest results for display and export."""

    @staticmethod
    def print_console(result: BacktestResult) -> None:
        """Print formatted report to console."""
        state = result.state
        m = state.metrics
        bh = state.buy_and_hold

        print("\n" + "=" * 70)
        print(f"  BACKTEST RESULTS: {result.strategy_name} v{result.strategy_version}")
        print("=" * 70)
        print(f"  Run:        {result.run_id}")
        print(f"  Input:      {result.input_path} ({result.data_kind.value})")
        params = ", ".join(f"{k}={v}" for k, v in result.strategy_config.items())
        print(f"  Params:     {params}")
        print(f"  Records:    {result.records:,} (skipped lines: {result.skipped_lines})")
        if result.out_of_order:
            print(f"  Out of order timestamps: {result.out_of_order}")
        print(f"  Period:     {state.init_timestamp} → {state.last_timestamp}")

        print("\n" + "-" * 70)
        print("  PORTFOLIO")
        print("-" * 70)
        print(f"  Initial cash:   {_money(state.initial_cash)}")
        print(f"  Cash:           {_money(state.cash)}")
        print(f"  Quantity:       {state.quantity:g} ({state.open_positions} open positions)")
        print(f"  Last price:     {_money(state.last_price)}")
        print(f"  Holdings:       {_money(state.holdings_value)}")
        print(f"  Valuation:      {_money(state.total_value)}")
        print(f"  Profit:         {_money(state.profit)}")
        print(f"  Tx costs:       {_money(state.total_tx_costs)}")

        print("\n" + "-" * 70)
        print("  ACTIVITY")
        print("-" * 70)
        print(f"  Signals:        {result.buy_signals} buy / {result.sell_signals} sell")
        print(f"  Trades:         {state.trades}")
        print(f"  Stop-losses:    {state.stop_losses}")
        print(f"  Take-profits:   {state.take_profits}")

        print("\n" + "-" * 70)
        print("  PERFORMANCE")
        print("-" * 70)
        print(f"  {'':<20} {'Strategy':>12} {'Buy & Hold':>12}")
        print(
            f"  {'Total return':<20} {format_pct(m.total_return if m else None):>12} "
            f"{format_pct(bh.total_return if bh else None):>12}"
        )
        print(
            f"  {'Annualized return':<20} {format_pct(m.annualized_return if m else None):>12} "
            f"{format_pct(bh.annualized_return if bh else None):>12}"
        )
        print(f"  {'Max drawdown':<20} {format_pct(m.max_drawdown if m else None):>12}")
        print(f"  {'Sharpe ratio':<20} {format_num(m.sharpe_ratio if m else None):>12}")

        print("\n" + "=" * 70)

    @staticmethod
    def to_dict(result: BacktestResult) -> dict:
        """Convert results to JSON-serializable dict."""
        state = result.state
        m = state.metrics
        bh = state.buy_and_hold
        return {
            "metadata": {
                "run_id": result.run_id,
                "strategy": result.strategy_name,
                "version": result.strategy_version,
                "strategy_config": result.strategy_config,
                "portfolio_config": result.portfolio_config,
                "input": result.input_path,
                "data_kind": result.data_kind.value,
                "records": result.records,
                "skipped_lines": result.skipped_lines,
                "out_of_order": result.out_of_order,
                "elapsed_seconds": round(result.elapsed_seconds, 3),
            },
            "portfolio": {
                "init_timestamp": state.init_timestamp,
                "last_timestamp": state.last_timestamp,
                "initial_cash": _num(state.initial_cash),
                "cash": _num(state.cash),
                "quantity": _num(state.quantity),
                "last_price": _num(state.last_price),
                "holdings_value": _num(state.holdings_value),
                "total_value": _num(state.total_value),
                "profit": _num(state.profit),
                "total_tx_costs": _num(state.total_tx_costs),
                "open_positions": state.open_positions,
            },
            "activity": {
                "buy_signals": result.buy_signals,
                "sell_signals": result.sell_signals,
                "trades": state.trades,
                "stop_losses": state.stop_losses,
                "take_profits": state.take_profits,
            },
            "metrics": None if m is None else {
                "start_value": _num(m.start_value),
                "end_value": _num(m.end_value),
                "num_points": m.num_points,
                "elapsed_years": _num(m.elapsed_years),
                "total_return": _num(m.total_return),
                "annualized_return": _num(m.annualized_return),
                "max_drawdown": _num(m.max_drawdown),
                "sharpe_ratio": _num(m.sharpe_ratio),
            },
            "buy_and_hold": None if bh is None else {
                "quantity": _num(bh.quantity),
                "leftover_cash": _num(bh.leftover_cash),
                "final_value": _num(bh.final_value),
                "total_return": _num(bh.total_return),
                "annualized_return": _num(bh.annualized_return),
            },
        }

    @staticmethod
    def save_json(result: BacktestResult, filepath: str) -> None:
        """Save results to JSON file."""
        data = ReportFormatter.to_dict(result)
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2, cls=ReportEncoder)
        print(f"\nResults saved to {filepath}")
