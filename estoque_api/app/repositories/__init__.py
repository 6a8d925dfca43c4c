"""Persistence layer: repositories wrapping the SQLite database."""
