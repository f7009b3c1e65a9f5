"""HTTP API for the booking engine."""

from .app import create_app

__all__ = ['create_app']
