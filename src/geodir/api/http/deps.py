"""FastAPI dependency implementations."""

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.geodir.api.http.app_data import ApplicationDependencies
from src.geodir.core.services import LocationResolver, UserEnrichmentService
from src.geodir.entities.core.user import UserRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a per-request database session and close it afterwards."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_location_resolver(request: Request) -> LocationResolver:
    """Get the location resolver instance."""
    return get_app_dependencies(request).location_resolver


def get_user_repository(session: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(session)


def get_user_enrichment_service(
    repository: UserRepository = Depends(get_user_repository),
    resolver: LocationResolver = Depends(get_location_resolver),
) -> UserEnrichmentService:
    return UserEnrichmentService(repository, resolver)
