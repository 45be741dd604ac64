"""Rule evaluation engine — evaluator, aggregator and project scanner."""
