"""
Core utilities shared across the code run API.

This package hosts configuration helpers (env vars, paths, limits) and the
logging setup. Routers and services depend on these primitives instead of
reading os.environ directly.
"""
