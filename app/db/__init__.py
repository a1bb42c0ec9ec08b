"""
Database module initialization
"""

from .mongodb import Database

__all__ = ["Database"]
