"""User database table model."""

from sqlmodel import Field

from src.geodir.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    """

    __tablename__ = "users"

    name: str
    zipcode: str = Field(index=True)
    latitude: float
    longitude: float
    timezone: str
