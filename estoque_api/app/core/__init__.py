"""Core infrastructure: settings, logging and database helpers."""
