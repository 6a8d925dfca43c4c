"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
storage only through a repository, so the API handlers never touch
the database directly.
"""
