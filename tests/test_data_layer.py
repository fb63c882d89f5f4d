"""Data layer tests.

This module covers:
- User entity construction and equality
- User table persistence
- User repository operations against in-memory SQLite
- Store failures surfacing as StoreFailureError
"""

from uuid import UUID

import pytest
from pydantic import ValidationError
from sqlalchemy import Engine
from sqlmodel import Session, select

from src.geodir.core.exceptions import (
    ConcurrentUpdateError,
    StoreFailureError,
    UserNotFoundError,
)
from src.geodir.entities.core.user import Location, User, UserRepository, UserTable


def make_user(**overrides) -> User:
    values = {
        "name": "Ana",
        "zipcode": "10001",
        "latitude": 40.75,
        "longitude": -73.99,
        "timezone": "America/New_York",
    }
    values.update(overrides)
    return User(**values)


class TestUserEntity:
    """Test User domain entity."""

    def test_user_creation(self):
        user = make_user()

        UUID(user.id)
        assert user.version == 1
        assert user.created_at is not None
        assert user.updated_at is not None

    def test_location_property(self):
        user = make_user()

        assert user.location == Location(
            latitude=40.75, longitude=-73.99, timezone="America/New_York"
        )

    def test_location_is_immutable(self):
        location = Location(latitude=1.0, longitude=2.0, timezone="UTC")

        with pytest.raises(ValidationError):
            location.timezone = "Europe/Paris"

    def test_user_requires_location_fields(self):
        with pytest.raises(ValidationError):
            User(name="Ana", zipcode="10001")

    def test_user_equality(self):
        """Should compare users by their business attributes, ignoring timestamps."""
        user1 = make_user(id="1")
        user2 = make_user(id="1", version=3)

        assert user1 == user2
        assert hash(user1) == hash(user2)
        assert user1 != make_user(id="1", timezone="America/Chicago")
        assert user1 != "not a user"


class TestUserTable:
    """Test User table persistence."""

    def test_table_round_trip(self, session: Session):
        user = make_user()
        session.add(UserTable.model_validate(user, from_attributes=True))
        session.commit()

        row = session.exec(select(UserTable).where(UserTable.id == user.id)).one()
        assert row.name == "Ana"
        assert row.zipcode == "10001"
        assert row.latitude == 40.75
        assert row.longitude == -73.99
        assert row.timezone == "America/New_York"
        assert row.version == 1

    def test_table_name(self):
        assert UserTable.__tablename__ == "users"


class TestUserRepository:
    """Test user repository operations against a real database."""

    def test_create_and_get(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        fetched = user_repository.get(created.id)
        assert fetched == created
        assert fetched.version == 1

    def test_get_missing(self, user_repository: UserRepository):
        assert user_repository.get("missing-id") is None

    def test_list_all_in_insertion_order(self, user_repository: UserRepository):
        assert user_repository.list_all() == []

        first = user_repository.create(make_user(name="First"))
        second = user_repository.create(make_user(name="Second", zipcode="90210"))

        assert [u.id for u in user_repository.list_all()] == [first.id, second.id]

    def test_update_fields(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        updated = user_repository.update_fields(
            created.id,
            {
                "zipcode": "90210",
                "latitude": 34.0901,
                "longitude": -118.4065,
                "timezone": "America/Los_Angeles",
            },
        )

        assert updated.name == "Ana"
        assert updated.zipcode == "90210"
        assert updated.timezone == "America/Los_Angeles"
        assert updated.version == 2
        assert user_repository.get(created.id) == updated

    def test_update_with_matching_version(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        updated = user_repository.update_fields(
            created.id, {"name": "Ana Maria"}, expected_version=1
        )

        assert updated.name == "Ana Maria"
        assert updated.version == 2

    def test_update_with_stale_version(self, user_repository: UserRepository):
        created = user_repository.create(make_user())
        user_repository.update_fields(created.id, {"name": "First writer"})

        with pytest.raises(ConcurrentUpdateError):
            user_repository.update_fields(
                created.id, {"name": "Second writer"}, expected_version=1
            )

        stored = user_repository.get(created.id)
        assert stored.name == "First writer"
        assert stored.version == 2

    def test_update_missing_user(self, user_repository: UserRepository):
        with pytest.raises(UserNotFoundError):
            user_repository.update_fields("missing-id", {"name": "Ghost"})

    def test_update_rejects_unknown_fields(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        with pytest.raises(ValueError, match="version"):
            user_repository.update_fields(created.id, {"version": 10})

    def test_delete(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        assert user_repository.delete(created.id) is True
        assert user_repository.get(created.id) is None
        assert user_repository.delete(created.id) is False

    def test_duplicate_id_is_store_failure(self, user_repository: UserRepository):
        created = user_repository.create(make_user())

        with pytest.raises(StoreFailureError) as exc_info:
            user_repository.create(make_user(id=created.id))

        assert "[SQL:" not in exc_info.value.message
        assert "Ana" not in exc_info.value.message

        # The session stays usable after the rollback
        assert len(user_repository.list_all()) == 1


class TestStoreFailures:
    """Every repository operation wraps database errors."""

    @pytest.fixture
    def broken_repository(self, empty_engine: Engine):
        with Session(empty_engine) as session:
            yield UserRepository(session)

    def test_list_fails(self, broken_repository: UserRepository):
        with pytest.raises(StoreFailureError) as exc_info:
            broken_repository.list_all()

        assert exc_info.value.message.startswith("Error during list:")

    def test_get_fails(self, broken_repository: UserRepository):
        with pytest.raises(StoreFailureError):
            broken_repository.get("any-id")

    def test_create_fails(self, broken_repository: UserRepository):
        with pytest.raises(StoreFailureError) as exc_info:
            broken_repository.create(make_user())

        assert exc_info.value.message.startswith("Error during insert:")

    def test_update_fails(self, broken_repository: UserRepository):
        with pytest.raises(StoreFailureError):
            broken_repository.update_fields("any-id", {"name": "Ana"})

    def test_delete_fails(self, broken_repository: UserRepository):
        with pytest.raises(StoreFailureError):
            broken_repository.delete("any-id")
