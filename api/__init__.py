"""HTTP API for the website audit service."""

from .server import create_app

__all__ = ['create_app']
