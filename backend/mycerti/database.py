"""Database connection and session management."""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from mycerti.config import settings

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine():
    url = settings.database_url
    echo = settings.environment == "development"

    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if url in IN_MEMORY_SQLITE_URLS:
            # Every session must see the same in-memory database
            options["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, **options)
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    # Use NullPool behind a transaction pooler, regular pooling otherwise
    if "pooler." in url or url.endswith(":6543"):
        return create_engine(url, poolclass=NullPool, echo=echo)

    return create_engine(url, pool_size=20, max_overflow=10, echo=echo)


engine = _build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Create all tables (in production, use migrations)."""
    import mycerti.models  # noqa: F401  register models with Base.metadata

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
