"""Database initialization script."""

from src.geodir.core.services import DbManageService, DbSessionService


def init_db(reset: bool = False) -> None:
    """Create all database tables, optionally dropping existing ones first."""
    database_service = DbSessionService()
    manager = DbManageService(database_service.engine)
    try:
        if reset:
            manager.drop_all()
        manager.create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
