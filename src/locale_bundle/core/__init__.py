"""Core infrastructure: errors, configuration and logging."""
