"""
Data layer for GH Score: MongoDB connection, models and repositories.
"""

from .database import DatabaseManager, get_database_manager

__all__ = ["DatabaseManager", "get_database_manager"]
