"""
Posts Application Package

A small social-posting backend: signed-in users write short posts and
everyone reads the newest posts together with their authors' profiles.

- config.py: Application configuration and environment settings
- database.py: Database connection and session management
- dependencies.py: FastAPI dependency injection functions
- errors.py: Error kinds and exception handlers
- limiter.py: Per-IP request rate limiting
- main.py: FastAPI application entry point
- models.py: SQLAlchemy ORM database models
- schemas.py: Pydantic request/response models

Subpackages:
- routes/: API route handlers
- services/: Business logic and external collaborators (auth, identity,
  rate limiting, posts)
- utils/: Input validators
"""
