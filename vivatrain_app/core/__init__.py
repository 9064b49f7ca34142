"""Core infrastructure: configuration, extensions, errors, signals."""
