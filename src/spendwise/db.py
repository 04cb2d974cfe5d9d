from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import DB_URL

# ---------- Engine / Session ----------

# echo=False to keep tests quiet
_engine: Engine = create_engine(DB_URL, future=True, echo=False)
# Expose the engine so other modules can import it
engine = _engine


SessionLocal = sessionmaker(
    bind=_engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

# ---------- Init helpers ----------

def _ensure_columns(conn, table: str, required: dict[str, str]) -> None:
    """
    Ensure each column in `required` exists on `table`.  For each missing col,
    perform ALTER TABLE … ADD COLUMN with the provided SQL snippet.
    """
    rows = conn.exec_driver_sql(f"PRAGMA table_info('{table}')").fetchall()
    existing = {row[1] for row in rows}  # row[1] = name

    for col_name, col_spec in required.items():
        if col_name not in existing:
            conn.exec_driver_sql(f"ALTER TABLE {table} ADD COLUMN {col_name} {col_spec}")


def _set_sqlite_pragmas(engine: Engine) -> None:
    with engine.connect() as conn:
        # Write-Ahead Log: allows readers while one writer is active
        conn.exec_driver_sql("PRAGMA journal_mode=WAL;")
        conn.exec_driver_sql("PRAGMA synchronous=NORMAL;")
        # How long SQLite should wait if the DB is busy (ms)
        conn.exec_driver_sql("PRAGMA busy_timeout=5000;")


def init_db() -> None:
    """
    Create the ORM tables and repair databases created by older versions.
    Safe to call on every startup.
    """
    # Import models here to avoid circular imports
    from .models import Base  # noqa: WPS433 (import inside function)

    Base.metadata.create_all(bind=_engine)  # no-ops on existing

    if _engine.dialect.name == "sqlite":
        # ledgers created before notes were supported lack the column
        with _engine.begin() as conn:
            _ensure_columns(conn, "transactions", {"note": "TEXT"})
        _set_sqlite_pragmas(_engine)


# convenience context manager used by the store functions
@contextmanager
def db_session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
