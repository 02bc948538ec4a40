"""Extraction and rendering services."""
