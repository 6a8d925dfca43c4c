"""
Top‑level package for the Estoque API.

This file makes ``estoque_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``estoque_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
