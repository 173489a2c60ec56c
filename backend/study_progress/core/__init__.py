"""Core helpers: clock, errors, locks and logging setup."""
