"""
FastAPI routers grouped by resource (photos, events, content, uploads).

Each file inside this package exposes an APIRouter that is included by the
application factory in app.py.
"""
