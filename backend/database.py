# backend/database.py
from sqlalchemy import BigInteger, Integer, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings

# No timeouts while a restore migrates and seeds (PostgreSQL only)
RESTORE_SESSION_SETTINGS = (
    "SET statement_timeout = 0",
    "SET lock_timeout = 0",
    "SET idle_in_transaction_session_timeout = 0",
    "SET client_min_messages = warning",
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE/RESTRICT unless enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False} # SQLite only
    else:
        connect_args = {}

    db_engine = create_engine(url, connect_args=connect_args, echo=echo, **kwargs)

    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
    return db_engine


engine = create_db_engine(settings.database_url, echo=settings.SQL_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# BIGSERIAL on PostgreSQL; SQLite only autoincrements INTEGER PRIMARY KEY
BigIntId = BigInteger().with_variant(Integer, "sqlite")

def enum_check(column: str, enum_cls) -> str:
    # Renders "<column> IN ('a', 'b')" from the enum values
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"

def not_postgresql(ddl, target, bind, *, dialect, **kw) -> bool:
    # ddl_if() callable for the non-PostgreSQL fallback of PostgreSQL-only DDL
    return dialect.name != "postgresql"

def init_db(bind=None):
    # Registers every table on Base.metadata before creating them
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)

def apply_restore_session_settings(connection):
    """Disable timeouts for the duration of a restore; no-op outside PostgreSQL."""
    if connection.dialect.name != "postgresql":
        return
    for statement in RESTORE_SESSION_SETTINGS:
        connection.execute(text(statement))
