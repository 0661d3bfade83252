"""
Core utilities shared across the community site API.

This package hosts:
- configuration helpers (env vars, paths, upload limits)
- logging setup
- the error taxonomy used by storage, services and routers
- id generation and URL helpers

Storage and service modules depend on these primitives instead of importing
FastAPI or reading the environment themselves.
"""
