"""User repository for database operations."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.geodir.core.exceptions import (
    ConcurrentUpdateError,
    StoreFailureError,
    UserNotFoundError,
)

from .entity import User
from .table import UserTable

UPDATABLE_FIELDS = frozenset({"name", "zipcode", "latitude", "longitude", "timezone"})


class UserRepository:
    """Data-access layer for users.

    Every write commits before returning, so a caller never observes a
    half-applied record. No operation leaves a connection checked out.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        """Get a user by ID."""
        try:
            row = self._session.get(UserTable, user_id, populate_existing=True)
            user = None if row is None else User.model_validate(row, from_attributes=True)
            self._release_connection()
        except SQLAlchemyError as e:
            raise self._failure("fetch", e) from e
        return user

    def list_all(self) -> list[User]:
        """List all users, oldest first."""
        statement = select(UserTable).order_by(UserTable.created_at, UserTable.id)
        try:
            rows = self._session.exec(statement).all()
            users = [User.model_validate(row, from_attributes=True) for row in rows]
            self._release_connection()
        except SQLAlchemyError as e:
            raise self._failure("list", e) from e
        return users

    def create(self, user: User) -> User:
        """Insert a complete user record."""
        row = UserTable.model_validate(user, from_attributes=True)
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
            created = User.model_validate(row, from_attributes=True)
            self._release_connection()
        except SQLAlchemyError as e:
            raise self._failure("insert", e) from e
        return created

    def update_fields(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> User:
        """Apply ``fields`` to an existing user in a single UPDATE statement.

        Args:
            user_id: ID of the user to update.
            fields: Subset of name, zipcode, latitude, longitude, timezone.
            expected_version: When given, the write only applies if the stored
                version still matches.

        Raises:
            UserNotFoundError: No user with that ID exists.
            ConcurrentUpdateError: The stored version moved past ``expected_version``.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        statement = update(UserTable).where(UserTable.id == user_id)
        if expected_version is not None:
            statement = statement.where(UserTable.version == expected_version)
        statement = statement.values(
            **fields,
            version=UserTable.version + 1,
            updated_at=datetime.now(UTC),
        )

        try:
            result = self._session.connection().execute(statement)
            if result.rowcount == 0:
                self._session.rollback()
            else:
                self._session.commit()
        except SQLAlchemyError as e:
            raise self._failure("update", e) from e

        updated = self.get(user_id)
        if updated is None:
            raise UserNotFoundError(user_id)
        if result.rowcount == 0:
            logger.warning(
                "Version conflict updating user {}: expected {}, found {}",
                user_id,
                expected_version,
                updated.version,
            )
            raise ConcurrentUpdateError(user_id)
        return updated

    def delete(self, user_id: str) -> bool:
        """Delete a user. Returns False when no such user exists."""
        try:
            row = self._session.get(UserTable, user_id)
            if row is None:
                return False
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete", e) from e
        return True

    def _release_connection(self) -> None:
        """End the implicit transaction so the pooled connection is returned."""
        self._session.rollback()

    def _failure(self, operation: str, error: SQLAlchemyError) -> StoreFailureError:
        self._session.rollback()
        logger.error("Database {} failed: {}", operation, error)
        return StoreFailureError(operation, error)
