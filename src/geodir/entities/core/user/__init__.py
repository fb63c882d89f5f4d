"""User entity module.

This module contains all User-related classes organized by responsibility:
- User / Location: Domain models
- UserTable: Database persistence model
- UserRepository: Data access layer
"""

from .entity import Location, User
from .repository import UserRepository
from .table import UserTable

__all__ = ["Location", "User", "UserTable", "UserRepository"]
