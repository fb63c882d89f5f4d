"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Location Services
from .location.resolver import LocationResolver, OpenWeatherLocationResolver

# User Services
from .user.enrichment import UserEnrichmentService, UserInput

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    # Location Services
    "LocationResolver",
    "OpenWeatherLocationResolver",
    # User Services
    "UserEnrichmentService",
    "UserInput",
]
