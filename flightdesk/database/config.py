"""
Database configuration and connection management for the booking engine.

Supported backends:
- SQLite (default, file or in-memory)
- MySQL/MariaDB through PyMySQL
- PostgreSQL

The seat inventory relies on the storage layer for mutual exclusion. MySQL and
PostgreSQL take row locks with SELECT ... FOR UPDATE; SQLite has no row locks,
so every SQLite write transaction starts with BEGIN IMMEDIATE and writers
queue on the database file. Read-only sessions start with a plain BEGIN and
never wait for writers. Lock waits are bounded by ``DB_LOCK_TIMEOUT`` seconds
on every backend.
"""

import os
import logging
from typing import Optional, Dict, Any
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool
from sqlalchemy.exc import SQLAlchemyError
from contextlib import contextmanager
from pathlib import Path

from .models import create_all_tables

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 30

# Backend name -> (URL template, default port, default user)
SERVER_BACKENDS = {
    'mysql': ("mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4", '3306', 'root'),
    'postgresql': ("postgresql://{user}:{password}@{host}:{port}/{name}", '5432', 'postgres'),
}

# Per-connection statement bounding how long a transaction waits for a row lock
LOCK_TIMEOUT_STATEMENTS = {
    'mysql': "SET SESSION innodb_lock_wait_timeout = {seconds}",
    'postgresql': "SET lock_timeout = '{seconds}s'",
}

# Connection execution option marking a transaction that never writes
READ_ONLY_OPTION = 'flightdesk_read_only'


def build_database_url() -> str:
    """
    Build the database URL from the environment.

    ``DATABASE_URL`` wins when set. Otherwise ``DB_TYPE`` picks the backend
    (sqlite, mysql, mariadb or postgresql) and ``DB_HOST``, ``DB_PORT``,
    ``DB_NAME``, ``DB_USER`` and ``DB_PASSWORD`` fill in the rest. SQLite
    files are created in the current working directory.

    Raises:
        ValueError: DB_TYPE names an unsupported backend
    """
    explicit = os.getenv('DATABASE_URL')
    if explicit:
        return explicit

    backend = os.getenv('DB_TYPE', 'sqlite').lower()
    if backend == 'mariadb':
        backend = 'mysql'

    if backend == 'sqlite':
        return f"sqlite:///{Path.cwd() / os.getenv('DB_NAME', 'flightdesk.db')}"

    if backend not in SERVER_BACKENDS:
        raise ValueError(f"Unsupported database type: {backend}")

    template, default_port, default_user = SERVER_BACKENDS[backend]
    return template.format(
        user=os.getenv('DB_USER', default_user),
        password=os.getenv('DB_PASSWORD', ''),
        host=os.getenv('DB_HOST', 'localhost'),
        port=os.getenv('DB_PORT', default_port),
        name=os.getenv('DB_NAME', 'flightdesk'),
    )


def detect_database_type(database_url: str) -> str:
    """Backend family of a URL: sqlite, mysql, postgresql or unknown."""
    scheme = database_url.split(':', 1)[0].split('+', 1)[0].lower()
    if scheme == 'mariadb':
        return 'mysql'
    if scheme in ('sqlite', 'mysql', 'postgresql'):
        return scheme
    return 'unknown'


class DatabaseConfig:
    """
    Engine, session factory and transaction scope for one database.

    Nothing connects until ``initialize()`` (or the first session) is called.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: bool = False,
        lock_timeout: Optional[int] = None,
    ):
        """
        Args:
            database_url: Database URL; built from the environment when omitted
            echo: Log every SQL statement
            lock_timeout: Seconds to wait for a lock; ``DB_LOCK_TIMEOUT`` or 30 when omitted
        """
        self.database_url = database_url or build_database_url()
        self.echo = echo
        if lock_timeout is None:
            lock_timeout = int(os.getenv('DB_LOCK_TIMEOUT', str(DEFAULT_LOCK_TIMEOUT_SECONDS)))
        self.lock_timeout = lock_timeout
        self.db_type = detect_database_type(self.database_url)
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self._is_initialized = False

        logger.debug(f"Database configured for {self.db_type} (lock timeout {self.lock_timeout}s)")

    @property
    def is_memory_database(self) -> bool:
        return self.db_type == 'sqlite' and (
            ':memory:' in self.database_url or self.database_url.rstrip('/') == 'sqlite:'
        )

    def _get_engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {'echo': self.echo, 'future': True, 'pool_pre_ping': True}

        if self.db_type == 'sqlite':
            # timeout is the busy wait while another connection holds the write lock
            kwargs['connect_args'] = {'check_same_thread': False, 'timeout': self.lock_timeout}
            # An in-memory database exists only inside its one connection
            if self.is_memory_database:
                kwargs['poolclass'] = StaticPool

        elif self.db_type in SERVER_BACKENDS:
            kwargs.update({
                'poolclass': QueuePool,
                'pool_size': int(os.getenv('DB_POOL_SIZE', '10')),
                'max_overflow': int(os.getenv('DB_MAX_OVERFLOW', '20')),
                'pool_timeout': int(os.getenv('DB_POOL_TIMEOUT', '30')),
                'pool_recycle': int(os.getenv('DB_POOL_RECYCLE', '3600')),
            })
            if self.db_type == 'mysql':
                kwargs['connect_args'] = {'charset': 'utf8mb4', 'connect_timeout': 30}

        return kwargs

    def initialize(self) -> None:
        """
        Create the engine and session factory and check connectivity.

        Raises:
            SQLAlchemyError: The engine cannot be created or cannot connect
        """
        if self._is_initialized:
            return

        try:
            self.engine = create_engine(self.database_url, **self._get_engine_kwargs())
            self._install_lock_listeners()

            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Failed to initialize {self.db_type} database: {e}")
            raise SQLAlchemyError(f"Database initialization failed: {e}")

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,  # models are built from rows after commit
        )
        self._is_initialized = True
        logger.info(f"Connected to {self.db_type} database")

    def _install_lock_listeners(self) -> None:
        """Register the per-connection settings; must run before the first connect."""
        lock_statement = LOCK_TIMEOUT_STATEMENTS.get(self.db_type)

        @event.listens_for(self.engine, "connect")
        def on_connect(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if self.db_type == 'sqlite':
                # Hand transaction control to SQLAlchemy so "begin" below can issue BEGIN IMMEDIATE
                dbapi_connection.isolation_level = None
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute("PRAGMA journal_mode=WAL")
            elif lock_statement:
                cursor.execute(lock_statement.format(seconds=self.lock_timeout))
            cursor.close()

        if self.db_type == 'sqlite':
            @event.listens_for(self.engine, "begin")
            def on_begin(conn):
                # Readers take no write lock, so reports never queue behind sales
                if conn.get_execution_options().get(READ_ONLY_OPTION):
                    conn.exec_driver_sql("BEGIN")
                else:
                    conn.exec_driver_sql("BEGIN IMMEDIATE")

    def create_tables(self) -> None:
        """
        Create the plane, flight and ticket tables when missing.

        Raises:
            SQLAlchemyError: Initialization or DDL failed
        """
        self.initialize()
        try:
            create_all_tables(self.engine)
        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
            raise SQLAlchemyError(f"Table creation failed: {e}")
        logger.info("Database tables ready")

    def get_session(self) -> Session:
        """New session; the caller owns commit, rollback and close."""
        self.initialize()
        return self.SessionLocal()

    @contextmanager
    def get_session_context(self, read_only: bool = False):
        """
        One transaction as a context manager.

        Usage:
            with db_config.get_session_context() as session:
                FlightRepository(session).get_for_update("SU100")

        Commits when the block exits normally. On any exception the
        transaction is rolled back (releasing its locks) and the exception
        propagates unchanged.

        Args:
            read_only: The block only reads. On SQLite the transaction then
                starts with a plain BEGIN instead of BEGIN IMMEDIATE.
        """
        session = self.get_session()
        try:
            if read_only:
                session.connection(execution_options={READ_ONLY_OPTION: True})
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Transaction rolled back: {e}")
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            self.initialize()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    def get_connection_info(self) -> Dict[str, Any]:
        """Connection summary for the CLI and health output (password masked)."""
        info = {
            'database_type': self.db_type,
            'database_url': make_url(self.database_url).render_as_string(hide_password=True),
            'is_initialized': self._is_initialized,
            'echo_enabled': self.echo,
            'lock_timeout': self.lock_timeout,
        }

        pool = self.engine.pool if self.engine else None
        if isinstance(pool, QueuePool):
            info.update({
                'pool_size': pool.size(),
                'checked_in': pool.checkedin(),
                'checked_out': pool.checkedout(),
            })

        return info

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")


# Process-wide configuration used by the API and the CLI
_db_config: Optional[DatabaseConfig] = None


def get_database_config(
    database_url: Optional[str] = None,
    echo: bool = False,
    lock_timeout: Optional[int] = None,
) -> DatabaseConfig:
    """Return the global DatabaseConfig, creating it on first use."""
    global _db_config

    if _db_config is None:
        _db_config = DatabaseConfig(database_url=database_url, echo=echo, lock_timeout=lock_timeout)

    return _db_config


def initialize_database(
    database_url: Optional[str] = None,
    echo: bool = False,
    create_tables: bool = True,
    lock_timeout: Optional[int] = None,
) -> DatabaseConfig:
    """
    Initialize the global database, creating its tables unless told otherwise.

    Returns:
        The initialized global DatabaseConfig
    """
    db_config = get_database_config(database_url=database_url, echo=echo, lock_timeout=lock_timeout)
    if create_tables:
        db_config.create_tables()
    else:
        db_config.initialize()

    return db_config


def reset_database_config() -> None:
    """Dispose of and forget the global configuration."""
    global _db_config

    if _db_config is not None:
        _db_config.close()
    _db_config = None
