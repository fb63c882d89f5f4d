"""User directory endpoints."""

from fastapi import APIRouter, Depends, status

from src.geodir.api.http.deps import get_user_enrichment_service, get_user_repository
from src.geodir.core.exceptions import UserNotFoundError
from src.geodir.core.services import UserEnrichmentService, UserInput
from src.geodir.entities.core.user import User, UserRepository

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[User])
def list_users(repository: UserRepository = Depends(get_user_repository)) -> list[User]:
    """Return every stored user."""
    return repository.list_all()


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: str,
    repository: UserRepository = Depends(get_user_repository),
) -> User:
    user = repository.get(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserInput,
    service: UserEnrichmentService = Depends(get_user_enrichment_service),
) -> User:
    """Create a user, resolving latitude, longitude and timezone from the zipcode."""
    return await service.create_user(payload)


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    payload: UserInput,
    service: UserEnrichmentService = Depends(get_user_enrichment_service),
) -> User:
    """Update a user. The location is re-resolved only if the zipcode changed."""
    return await service.update_user(user_id, payload)


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    repository: UserRepository = Depends(get_user_repository),
) -> dict[str, str]:
    if not repository.delete(user_id):
        raise UserNotFoundError(user_id)
    return {"message": "User deleted successfully"}
