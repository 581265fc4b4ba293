"""Domain events emitted by the order pipeline."""
