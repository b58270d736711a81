"""
High-level use cases for the code run API.

Routers (FastAPI endpoints) call these services instead of manipulating the
stored document directly.
"""
