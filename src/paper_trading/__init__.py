"""Paper trading service: virtual portfolios, simulated trades and live prices."""
