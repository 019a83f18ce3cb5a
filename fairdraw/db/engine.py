from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from fairdraw.config import load_settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE SET NULL on draw_history.list_id without this.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create the engine for the draw history store.

    ``database_url`` defaults to ``DB_URL`` from the environment (see
    :func:`fairdraw.config.load_settings`).
    """
    url = database_url or load_settings().db_url
    engine = create_engine(
        url,
        echo=echo,
        future=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # records stay readable after the draw is committed
        future=True,
    )


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    Session = get_sessionmaker(engine or make_engine())
    with Session.begin() as session:
        yield session
