"""User domain entity."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.geodir.entities.core._base import Entity


class Location(BaseModel):
    """Coordinates and timezone derived from a postal code."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(description="Latitude in decimal degrees")
    longitude: float = Field(description="Longitude in decimal degrees")
    timezone: str = Field(description="Timezone identifier reported by the provider")


class User(Entity):
    """User entity representing a person in the directory.

    The location fields are never client-supplied; they always describe the
    current ``zipcode``.
    """

    name: str = Field(description="User's display name")
    zipcode: str = Field(description="5-digit or ZIP+4 postal code")
    latitude: float = Field(description="Latitude resolved from the zipcode")
    longitude: float = Field(description="Longitude resolved from the zipcode")
    timezone: str = Field(description="Timezone resolved from the zipcode")

    @property
    def location(self) -> Location:
        return Location(
            latitude=self.latitude, longitude=self.longitude, timezone=self.timezone
        )

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.zipcode == other.zipcode
            and self.latitude == other.latitude
            and self.longitude == other.longitude
            and self.timezone == other.timezone
        )

    def __hash__(self) -> int:
        return hash((
            self.id,
            self.name,
            self.zipcode,
            self.latitude,
            self.longitude,
            self.timezone,
        ))
