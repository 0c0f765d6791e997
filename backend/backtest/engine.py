"""Single-pass backtest processing engine.

Ties together a RecordSource, a Strategy and a Portfolio to replay
records in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from core.models import Side
from core.strategy.protocol import Strategy

from backtest.portfolio import Portfolio, PortfolioState
from backtest.source import RecordSource

logger = logging.getLogger(__name__)

StateCallback = Callable[[PortfolioState], None]


def _print_state(state: PortfolioState) -> None:
    print(state)


@dataclass
class EngineResult:
    """Result of one pass over a record source."""

    records: int
    buy_signals: int
    sell_signals: int
    out_of_order: int
    state: PortfolioState


class BacktestEngine:
    """Pump records through a strategy into a portfolio.

    Processing order for each record:
    1. Strategy turns the record into a Signal (HOLD during warm-up)
    2. Portfolio applies risk rules and executes the signal
    3. In verbose mode, the portfolio state is emitted after every BUY/SELL

    Every signal, HOLD included, reaches the portfolio so stop-loss and
    take-profit levels are checked against every price.
    """

    def __init__(
        self,
        source: RecordSource,
        strategy: Strategy,
        portfolio: Portfolio,
        verbose: bool = False,
        on_state: StateCallback | None = None,
    ):
        if source.kind != strategy.required_data_kind:
            raise ValueError(
                f"Strategy '{strategy.name}' requires {strategy.required_data_kind.value} "
                f"records, source provides {source.kind.value}"
            )
        self.source = source
        self.strategy = strategy
        self.portfolio = portfolio
        self.verbose = verbose
        self._on_state = on_state or _print_state

    def run(self) -> EngineResult:
        records = 0
        buys = 0
        sells = 0
        out_of_order = 0
        last_timestamp: int | None = None

        for record in self.source:
            records += 1
            if last_timestamp is not None and record.timestamp < last_timestamp:
                out_of_order += 1
                logger.warning(
                    f"Timestamp regression: {record.timestamp} after {last_timestamp}"
                )
            last_timestamp = record.timestamp

            signal = self.strategy.update(record)
            self.portfolio.update(signal)

            if signal.side == Side.HOLD:
                continue
            if signal.side == Side.BUY:
                buys += 1
            else:
                sells += 1
            if self.verbose:
                self._on_state(self.portfolio.snapshot())

        logger.info(
            f"Processed {records:,} records: {buys} buy / {sells} sell signals, "
            f"{self.portfolio.trade_count} fills"
        )
        return EngineResult(
            records=records,
            buy_signals=buys,
            sell_signals=sells,
            out_of_order=out_of_order,
            state=self.portfolio.snapshot(),
        )
