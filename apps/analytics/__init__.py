"""Analytics app package: dashboard aggregates, digests and report export."""
