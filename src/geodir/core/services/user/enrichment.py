"""Create and update users with location data derived from their zipcode."""

from loguru import logger
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from src.geodir.core.exceptions import UserNotFoundError
from src.geodir.core.services.location.resolver import LocationResolver
from src.geodir.core.validation import validate_user_input
from src.geodir.entities.core.user import User, UserRepository


class UserInput(BaseModel):
    """Request body accepted by the create and update endpoints.

    Both fields are optional here so that missing values reach the
    validation gate and produce its specific messages.
    """

    name: str | None = Field(default=None, description="User's display name")
    zipcode: str | None = Field(default=None, description="5-digit or ZIP+4 postal code")


class UserEnrichmentService:
    """Writes users so that their location always matches their zipcode.

    A create always resolves the zipcode. An update resolves only when the
    zipcode differs from the stored one. If resolution fails nothing is
    written. Store calls run in a worker thread so a slow database does not
    stall the event loop.
    """

    def __init__(self, repository: UserRepository, resolver: LocationResolver) -> None:
        self._repository = repository
        self._resolver = resolver

    async def create_user(self, payload: UserInput) -> User:
        validate_user_input(payload.name, payload.zipcode)

        location = await self._resolver.resolve(payload.zipcode)
        user = User(
            name=payload.name,
            zipcode=payload.zipcode,
            latitude=location.latitude,
            longitude=location.longitude,
            timezone=location.timezone,
        )
        created = await run_in_threadpool(self._repository.create, user)
        logger.info("Created user {} for zipcode {}", created.id, created.zipcode)
        return created

    async def update_user(self, user_id: str, payload: UserInput) -> User:
        validate_user_input(payload.name, payload.zipcode)

        current = await run_in_threadpool(self._repository.get, user_id)
        if current is None:
            raise UserNotFoundError(user_id)

        fields: dict[str, object] = {"name": payload.name, "zipcode": payload.zipcode}
        # Literal comparison: "12345" and "12345-0000" are different codes
        if payload.zipcode != current.zipcode:
            location = await self._resolver.resolve(payload.zipcode)
            fields.update(location.model_dump())
            logger.info(
                "Zipcode for user {} changed from {} to {}",
                user_id,
                current.zipcode,
                payload.zipcode,
            )
        else:
            logger.debug("Zipcode for user {} unchanged; keeping stored location", user_id)

        return await run_in_threadpool(
            self._repository.update_fields,
            user_id,
            fields,
            expected_version=current.version,
        )
