"""Statement aggregation services."""
