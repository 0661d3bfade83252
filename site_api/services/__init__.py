"""
High-level use cases for the community site API.

Each service module orchestrates repositories to implement business rules
(add a photo with its upload, replace an event image, merge site content).

Routers (FastAPI endpoints) call these services instead of manipulating the
store, the snapshots or the uploads directory directly.
"""
