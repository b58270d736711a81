"""
FastAPI routers grouped by domain (system, users).

Each module exposes an APIRouter that the application factory includes.
"""
