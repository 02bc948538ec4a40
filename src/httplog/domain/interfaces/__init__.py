"""Protocols for loggers and sinks."""
