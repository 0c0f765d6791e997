"""Cash/position ledger that executes strategy signals.

Processing order for each signal:
1. Ignore signals without a positive price (invalid ticks)
2. On the first valid signal, capture the starting point and seed the
   equity curve with the initial cash
3. Risk check: liquidate each open position whose stop-loss or
   take-profit level is crossed at the current price
4. Execute the signal: BUY opens one position with as many whole units
   as cash allows after commission; SELL liquidates every position
5. Append an equity point marked to the current price

Each position settles independently, so the order in which positions
are liquidated within one risk pass does not change cash or quantity.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from core.models.ledger import EquityPoint, Position
from core.models.signal import Side, Signal

from backtest.config import PortfolioConfig
from backtest.stats import BuyAndHoldResult, PerformanceMetrics, StatisticsCalculator

logger = logging.getLogger(__name__)


@dataclass
class PortfolioState:
    """Point-in-time dump of a portfolio, with derived performance."""

    init_timestamp: int | None
    last_timestamp: int | None
    initial_cash: float
    cash: float
    quantity: float
    last_price: float
    holdings_value: float
    total_value: float
    profit: float
    total_tx_costs: float
    trades: int
    stop_losses: int
    take_profits: int
    open_positions: int
    metrics: PerformanceMetrics | None = None
    buy_and_hold: BuyAndHoldResult | None = None

    def __str__(self) -> str:
        m = self.metrics
        bh = self.buy_and_hold
        parts = [
            f"timestamp: {self.last_timestamp}",
            f"init_cash: {self.initial_cash:.2f}",
            f"cash: {self.cash:.2f}",
            f"quantity: {self.quantity:g}",
            f"holdings: {self.holdings_value:.2f}",
            f"valuation: {self.total_value:.2f}",
            f"profit: {self.profit:.2f}",
            f"tx_costs: {self.total_tx_costs:.2f}",
            f"trades: {self.trades}",
            f"stop_losses: {self.stop_losses}",
            f"take_profits: {self.take_profits}",
            f"return: {format_pct(m.total_return if m else None)}",
            f"annual_return: {format_pct(m.annualized_return if m else None)}",
            f"max_drawdown: {format_pct(m.max_drawdown if m else None)}",
            f"sharpe: {format_num(m.sharpe_ratio if m else None)}",
            f"buy_hold_return: {format_pct(bh.total_return if bh else None)}",
            f"buy_hold_annual: {format_pct(bh.annualized_return if bh else None)}",
        ]
        return " ".join(parts)


def format_pct(value: float | None) -> str:
    """Format a fraction as a percentage, 'n/a' when unavailable."""
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value * 100:.2f}%"


def format_num(value: float | None) -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value:.4f}"


class Portfolio:
    """Single-asset long-only account driven by signals.

    Instances are single-use: a new backtest needs a new Portfolio.
    """

    def __init__(self, config: PortfolioConfig | None = None):
        self.config = config or PortfolioConfig()
        self.initial_cash = self.config.initial_cash
        self.tx_cost_pct = self.config.tx_cost_pct
        self.stop_loss = self.config.stop_loss
        self.take_profit = self.config.take_profit

        self.cash = self.initial_cash
        self.positions: list[Position] = []
        self.equity_curve: list[EquityPoint] = []

        self.init_timestamp: int | None = None
        self.init_price: float | None = None
        self.last_timestamp: int | None = None
        self.last_price = math.nan

        self.total_tx_costs = 0.0
        self.trade_count = 0
        self.stop_loss_count = 0
        self.take_profit_count = 0

        self._stats = StatisticsCalculator(self.config.timestamp_unit_seconds)

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    @property
    def quantity(self) -> float:
        return sum(p.quantity for p in self.positions)

    @property
    def holdings_value(self) -> float:
        """Open quantity marked to the last valid price."""
        if not self.positions:
            return 0.0
        return self.quantity * self.last_price

    @property
    def total_value(self) -> float:
        return self.cash + self.holdings_value

    # ------------------------------------------------------------------
    # Signal processing
    # ------------------------------------------------------------------

    def update(self, signal: Signal) -> None:
        """Apply risk rules and execute one signal at its price."""
        price = signal.price
        if not price > 0.0:
            logger.debug(f"Ignoring signal with invalid price {price} at {signal.timestamp}")
            return

        timestamp = signal.timestamp
        if self.init_timestamp is None:
            self.init_timestamp = timestamp
            self.init_price = price
            self.equity_curve.append(EquityPoint(timestamp, self.initial_cash))

        self.last_timestamp = timestamp
        self.last_price = price

        self._apply_risk_rules(price)

        if signal.side == Side.BUY:
            self._buy(timestamp, price)
        elif signal.side == Side.SELL:
            self._sell_all(price)

        self.equity_curve.append(
            EquityPoint(timestamp, self.cash + self.quantity * price)
        )

    def _apply_risk_rules(self, price: float) -> None:
        if self.stop_loss is None and self.take_profit is None:
            return

        remaining: list[Position] = []
        for position in self.positions:
            acquired = position.acquisition_price
            if self.stop_loss is not None and price <= acquired * (1.0 - self.stop_loss):
                self._settle(position, price)
                self.stop_loss_count += 1
                logger.debug(f"Stop-loss: {position.quantity:g} @ {price} (bought {acquired})")
            elif self.take_profit is not None and price >= acquired * (1.0 + self.take_profit):
                self._settle(position, price)
                self.take_profit_count += 1
                logger.debug(f"Take-profit: {position.quantity:g} @ {price} (bought {acquired})")
            else:
                remaining.append(position)
        self.positions = remaining

    def _buy(self, timestamp: int, price: float) -> None:
        quantity = math.floor(self.cash / (price * (1.0 + self.tx_cost_pct)))
        # Float rounding in the division can overshoot by one unit
        while quantity > 0 and quantity * price * (1.0 + self.tx_cost_pct) > self.cash:
            quantity -= 1
        if quantity <= 0:
            logger.debug(f"BUY @ {price} skipped: cash {self.cash:.2f} buys no whole unit")
            return

        notional = quantity * price
        commission = notional * self.tx_cost_pct
        self.cash -= notional + commission
        self.total_tx_costs += commission
        self.trade_count += 1
        self.positions.append(
            Position(open_timestamp=timestamp, quantity=float(quantity), acquisition_price=price)
        )

    def _sell_all(self, price: float) -> None:
        for position in self.positions:
            self._settle(position, price)
        self.positions = []

    def _settle(self, position: Position, price: float) -> None:
        """Close one position at price, paying its own commission."""
        notional = position.market_value(price)
        commission = notional * self.tx_cost_pct
        self.cash += notional - commission
        self.total_tx_costs += commission
        self.trade_count += 1

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def metrics(self) -> PerformanceMetrics | None:
        """Performance of the equity curve so far, None before any valid price."""
        if not self.equity_curve:
            return None
        return self._stats.calculate(self.equity_curve)

    def buy_and_hold(self) -> BuyAndHoldResult | None:
        if self.init_price is None or self.last_timestamp is None:
            return None
        return self._stats.buy_and_hold(
            initial_cash=self.initial_cash,
            init_price=self.init_price,
            init_timestamp=self.init_timestamp,
            last_price=self.last_price,
            last_timestamp=self.last_timestamp,
        )

    def snapshot(self) -> PortfolioState:
        total = self.total_value
        return PortfolioState(
            init_timestamp=self.init_timestamp,
            last_timestamp=self.last_timestamp,
            initial_cash=self.initial_cash,
            cash=self.cash,
            quantity=self.quantity,
            last_price=self.last_price,
            holdings_value=self.holdings_value,
            total_value=total,
            profit=total - self.initial_cash,
            total_tx_costs=self.total_tx_costs,
            trades=self.trade_count,
            stop_losses=self.stop_loss_count,
            take_profits=self.take_profit_count,
            open_positions=len(self.positions),
            metrics=self.metrics(),
            buy_and_hold=self.buy_and_hold(),
        )

    def __str__(self) -> str:
        return str(self.snapshot())
