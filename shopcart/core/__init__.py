"""Core helpers: configuration, errors, scheduling and cart arithmetic."""
