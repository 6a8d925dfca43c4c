"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (settings, logging, database), ``schemas``
(pydantic payloads), ``repositories`` (the product store),
``services`` (business rules) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
