"""
Core module initialization
"""

# The logger imports app.middleware, which imports config: keep this to config only
from .config import config

__all__ = ["config"]
