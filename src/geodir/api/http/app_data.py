from dataclasses import dataclass

from src.geodir.core.services import DbSessionService, LocationResolver


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    location_resolver: LocationResolver
