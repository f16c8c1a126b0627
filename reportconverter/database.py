"""Database engine and session handling."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import URL, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from reportconverter.config import Config, DbConfig
from reportconverter.entity import Base


def build_dsn(db_config: DbConfig) -> str:
    """Build a PostgreSQL connection URL from the database settings."""
    query = {}
    if db_config.sslmode:
        query["sslmode"] = db_config.sslmode
    if db_config.timezone:
        query["options"] = f"-c TimeZone={db_config.timezone}"
    url = URL.create(
        "postgresql",
        username=db_config.user or None,
        password=db_config.password or None,
        host=db_config.host or None,
        port=db_config.port or None,
        database=db_config.dbname or None,
        query=query,
    )
    return url.render_as_string(hide_password=False)


class Database:
    """An engine with a factory for transactional sessions."""

    def __init__(self, url):
        self.engine = create_engine(url)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        with self._sessions.begin() as session:
            yield session

    def create_all(self) -> None:
        """Create every table the models define."""
        Base.metadata.create_all(self.engine)


_lock = threading.Lock()
_instance: Database | None = None


def get_database(config: Config) -> Database:
    """Connect to the configured database once and reuse the connection."""
    global _instance
    with _lock:
        if _instance is None:
            try:
                database = Database(build_dsn(config.db))
                with database.engine.connect():
                    pass
            except (SQLAlchemyError, ImportError, OSError) as exc:
                raise RuntimeError("failed to connect database") from exc
            _instance = database
        return _instance