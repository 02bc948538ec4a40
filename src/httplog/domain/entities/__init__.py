"""Immutable request entities."""
