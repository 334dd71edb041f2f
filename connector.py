"""Two-stage MySQL connection bring-up for the bootstrap.

Stage one opens a server-level session with no default schema and makes sure
the target schema exists. Stage two opens the session the rest of the run
works on: bound to the schema, autocommitting, with multi-statement
execution enabled on the PyMySQL side.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from pymysql.constants import CLIENT
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from config import DatabaseConfig

logger = logging.getLogger('setup_database.connector')

DRIVER = 'mysql+pymysql'
CONNECT_TIMEOUT = 10

# MySQL client/server error codes seen when the bootstrap cannot get in.
_HINTS = {
    1044: 'The user has no privileges on this database. Grant access or choose another DB_NAME.',
    1045: 'Database credentials are incorrect. Check DB_USER and DB_PASSWORD.',
    1049: 'Database does not exist. Check DB_NAME or create the database.',
    2003: 'MySQL server might not be running. Check DB_HOST, DB_PORT and that the service is up.',
    2005: 'Unknown MySQL host. Check DB_HOST.',
    2013: 'Connection timed out. Check DB_HOST and network connectivity.',
}


class ConnectError(RuntimeError):
    """A database session could not be opened or the schema not created."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code
        self.hint = _HINTS.get(code) if code is not None else None


def driver_error_code(exc: BaseException) -> int | None:
    orig = getattr(exc, 'orig', None)
    args = getattr(orig, 'args', None) or ()
    if args and isinstance(args[0], int):
        return args[0]
    return None


def driver_message(exc: BaseException) -> str:
    orig = getattr(exc, 'orig', None)
    return str(orig if orig is not None else exc)


def build_url(config: DatabaseConfig, with_database: bool = True) -> URL:
    return URL.create(
        DRIVER,
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=config.database if with_database else None,
        query={'charset': 'utf8mb4'},
    )


def _make_engine(config: DatabaseConfig, with_database: bool, multi_statements: bool = False) -> Engine:
    connect_args = {'connect_timeout': CONNECT_TIMEOUT}
    if multi_statements:
        connect_args['client_flag'] = CLIENT.MULTI_STATEMENTS | CLIENT.FOUND_ROWS
    # NullPool: closing a connection closes the server-side session too.
    return create_engine(
        build_url(config, with_database=with_database),
        poolclass=NullPool,
        isolation_level='AUTOCOMMIT',
        connect_args=connect_args,
    )


def _connect_error(action: str, exc: SQLAlchemyError) -> ConnectError:
    code = driver_error_code(exc)
    return ConnectError(f'{action}: {driver_message(exc)}', code=code)


def ensure_database(config: DatabaseConfig) -> None:
    """Create the target schema if it is missing; an existing one is left alone."""
    engine = _make_engine(config, with_database=False)
    try:
        with engine.connect() as conn:
            logger.info('Connected to MySQL server at %s:%s', config.host, config.port)
            quoted = engine.dialect.identifier_preparer.quote_identifier(config.database)
            conn.exec_driver_sql(f'CREATE DATABASE IF NOT EXISTS {quoted} CHARACTER SET utf8mb4')
            logger.info("Database '%s' ensured", config.database)
    except SQLAlchemyError as exc:
        raise _connect_error(f"Could not ensure database '{config.database}'", exc) from exc
    finally:
        engine.dispose()


@contextmanager
def bound_session(config: DatabaseConfig) -> Iterator[Connection]:
    """Yield a connection bound to ``config.database``.

    The connection is closed and the engine disposed on every exit path.
    """
    engine = _make_engine(config, with_database=True, multi_statements=True)
    try:
        try:
            connection = engine.connect()
        except SQLAlchemyError as exc:
            raise _connect_error(f"Could not connect to database '{config.database}'", exc) from exc
        logger.info("Connected to database '%s'", config.database)
        try:
            yield connection
        finally:
            connection.close()
            logger.info('Database connection closed')
    finally:
        engine.dispose()
