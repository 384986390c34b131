"""
Database engine, session management, and base model.

Every model inherits from Base. Services receive a session
factory (the storage handle) and open one unit of work per
operation from it.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from savings_ledger.config import get_settings

settings = get_settings()


def engine_options(database_url: str, statement_timeout_ms: int) -> dict:
    """
    Build create_engine() keyword arguments for a database URL.

    The statement timeout bounds how long any ledger operation
    can block on the database before failing.
    """
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        # sqlite3's busy timeout is in seconds
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": statement_timeout_ms / 1000,
            },
        }
    if backend == "postgresql":
        return {
            "pool_pre_ping": True,
            "connect_args": {
                "options": f"-c statement_timeout={statement_timeout_ms}",
            },
        }
    return {"pool_pre_ping": True}


# --- Engine ---
engine = create_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL, settings.DB_STATEMENT_TIMEOUT_MS),
)

# --- Session Factory ---
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
# expire_on_commit=False keeps returned objects readable after
# the unit of work that produced them has committed.
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_session_factory() -> sessionmaker:
    """
    Provide the storage handle for a request.

    Services open and close their own sessions from it, one
    per operation, so no session outlives the work it does.
    """
    return SessionLocal
