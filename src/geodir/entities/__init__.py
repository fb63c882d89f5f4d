"""Entities organized by business concept.

Each entity package holds its domain model (entity.py), its persistence
model (table.py) and its data-access layer (repository.py).
"""

from .core.user import Location, User, UserRepository, UserTable

__all__ = [
    "Location",
    "User",
    "UserRepository",
    "UserTable",
]
