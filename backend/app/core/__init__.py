"""Core utilities: pipeline error types, payload extraction and error reporting."""
