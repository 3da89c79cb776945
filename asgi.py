"""
asgi.py -- ASGI entry point for the product catalog API.

Run with:  uvicorn asgi:app --reload

Kept separate from api/main.py so process managers (uvicorn, gunicorn with
uvicorn workers) have one stable import path regardless of how api/ is laid
out internally.
"""

from api.main import app

__all__ = ["app"]
