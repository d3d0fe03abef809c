"""
HTTP API for MockEm (FastAPI).
"""

from mockem.api.app import create_app

__all__ = ["create_app"]
