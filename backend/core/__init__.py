"""Core shared logic for indicators, strategies, and models.

This package contains pure business logic with no I/O dependencies
(no files, network, or clocks). The backtesting system (backtest/)
feeds records through it and simulates the resulting account.
"""
