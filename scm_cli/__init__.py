"""
Command-line interface for the SCM client.
"""
from .main import app

__all__ = ["app"]
