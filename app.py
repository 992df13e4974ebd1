"""
FastAPI standalone server for development
Run from the repository root: uvicorn app:app --reload
"""

import ajos_backend  # noqa: F401  (puts the package directory on sys.path)
from ajos_backend.app import app, create_app

__all__ = ["app", "create_app"]
