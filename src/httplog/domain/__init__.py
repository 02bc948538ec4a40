"""Domain layer: request entities, interfaces and pure services (no I/O)."""
