"""
Pydantic schema definitions for API payloads.

Request bodies (``ProductCreate``, ``Order``), the public product view
(``Product``) and the persisted form (``ProductRecord``) are separate
models so the API representation stays decoupled from storage.
"""
