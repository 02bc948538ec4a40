"""Infrastructure: middleware, sinks and diagnostic logging."""
