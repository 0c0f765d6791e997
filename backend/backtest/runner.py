"""BacktestRunner: orchestrates the full backtest pipeline.

Builds the strategy, portfolio and record source for one run, replays
the records through BacktestEngine and collects the outcome.

A run_id is derived from the configuration alone, so the same inputs
always map to the same id.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from core.models import DataKind
from core.strategy import create_strategy_from_params

from backtest.config import PortfolioConfig
from backtest.engine import BacktestEngine, StateCallback
from backtest.portfolio import Portfolio, PortfolioState
from backtest.source import CsvRecordSource, RecordSource, open_source

logger = logging.getLogger(__name__)


@dataclass
class BacktestConfig:
    """Configuration for a backtest run."""

    strategy_name: str
    input_path: str = "-"
    strategy_params: dict[str, Any] = field(default_factory=dict)
    portfolio: PortfolioConfig = field(default_factory=PortfolioConfig)
    has_header: bool = True
    verbose: bool = False


@dataclass
class BacktestResult:
    """Outcome of one backtest run."""

    run_id: str
    strategy_name: str
    strategy_version: str
    strategy_config: dict[str, Any]
    portfolio_config: dict[str, Any]
    input_path: str
    data_kind: DataKind
    records: int
    skipped_lines: int
    buy_signals: int
    sell_signals: int
    out_of_order: int
    state: PortfolioState
    elapsed_seconds: float = 0.0


def generate_run_id(config: BacktestConfig) -> str:
    """Generate a run ID from the configuration."""
    key = (
        f"{config.strategy_name}"
        f":{json.dumps(config.strategy_params, sort_keys=True, default=str)}"
        f":{config.input_path}"
        f":{config.has_header}"
        f":{config.portfolio.model_dump_json()}"
    )
    return hashlib.sha256(key.encode()).hexdigest()[:16]


class BacktestRunner:
    """Run one strategy over one record source."""

    def __init__(
        self,
        config: BacktestConfig,
        source: RecordSource | None = None,
        on_state: StateCallback | None = None,
    ):
        self.config = config
        self._source = source
        self._on_state = on_state

    def run(self) -> BacktestResult:
        """Execute the full backtest pipeline.

        Raises:
            KeyError: Unknown strategy name.
            pydantic.ValidationError: Invalid strategy parameters.
            ValueError: Source and strategy disagree on the data kind.
        """
        start_time = time.time()
        run_id = generate_run_id(self.config)

        strategy = create_strategy_from_params(
            self.config.strategy_name, self.config.strategy_params
        )
        source = self._source
        if source is None:
            source = open_source(
                self.config.input_path,
                strategy.required_data_kind,
                has_header=self.config.has_header,
            )
        portfolio = Portfolio(self.config.portfolio)

        logger.info(
            f"Starting backtest run={run_id}: {strategy.name} v{strategy.version} "
            f"on {self.config.input_path} ({source.kind.value})"
        )

        engine = BacktestEngine(
            source=source,
            strategy=strategy,
            portfolio=portfolio,
            verbose=self.config.verbose,
            on_state=self._on_state,
        )
        outcome = engine.run()

        skipped = source.skipped if isinstance(source, CsvRecordSource) else 0
        if skipped:
            logger.warning(f"Skipped {skipped} malformed lines in {self.config.input_path}")

        elapsed = time.time() - start_time
        logger.info(
            f"Backtest run={run_id} completed in {elapsed:.2f}s: "
            f"{outcome.records:,} records, {outcome.state.trades} trades"
        )

        return BacktestResult(
            run_id=run_id,
            strategy_name=strategy.name,
            strategy_version=strategy.version,
            strategy_config=strategy.config.model_dump(mode="json"),
            portfolio_config=self.config.portfolio.model_dump(mode="json"),
            input_path=self.config.input_path,
            data_kind=source.kind,
            records=outcome.records,
            skipped_lines=skipped,
            buy_signals=outcome.buy_signals,
            sell_signals=outcome.sell_signals,
            out_of_order=outcome.out_of_order,
            state=outcome.state,
            elapsed_seconds=elapsed,
        )
