"""Application layer: the concrete access logger."""
