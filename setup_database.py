"""Complete database setup for the Shopee affiliate admin backend.

Ensures the schema exists, creates all tables, upserts the reference rows and
prints a row-count summary. Safe to run repeatedly.

Usage:
  python setup_database.py
"""
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler

from sqlalchemy.exc import SQLAlchemyError

from config import ConfigError, DatabaseConfig, load_config, load_env_file, sql_debug_enabled
from connector import ConnectError, bound_session, driver_message, ensure_database
from schema import TABLE_NAMES, TABLES
from seeds import EXPECTED_COUNTS, SEEDS

logger = logging.getLogger('setup_database')

RULE = '=' * 80
SQL_PREVIEW_CHARS = 200
PASSWORD_HASH_RE = re.compile(r'^[0-9a-f]{32}:[0-9a-f]{128}$')
SEED_ADMIN_USERNAME = 'admin'


class StepError(RuntimeError):
    """A schema or seed statement failed. Logged, never fatal."""

    def __init__(self, description: str, message: str):
        super().__init__(f'{description} - Failed: {message}')
        self.description = description
        self.message = message


@dataclass
class StepReport:
    succeeded: list[str] = field(default_factory=list)
    failed: list[StepError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


class _BelowWarning(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def configure_logging(environ=None) -> None:
    """Progress to stdout, warnings and errors to stderr, optional rotating file."""
    env = os.environ if environ is None else environ
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_format = logging.Formatter('%(message)s')
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(console_format)
    stdout_handler.addFilter(_BelowWarning())
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(console_format)
    stderr_handler.setLevel(logging.WARNING)
    logger.addHandler(stderr_handler)

    log_file = (env.get('SETUP_LOG_FILE') or '').strip()
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = RotatingFileHandler(log_file, maxBytes=10240, backupCount=10)
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if sql_debug_enabled(env) else logging.INFO)


def _preview(statement: str) -> str:
    compact = ' '.join(statement.split())
    if len(compact) > SQL_PREVIEW_CHARS:
        return compact[:SQL_PREVIEW_CHARS] + '...'
    return compact


def execute_step(connection, statement: str, description: str, params=None, report: StepReport | None = None) -> bool:
    """Run one statement and report its outcome.

    Driver errors are logged as a :class:`StepError` and turned into a False
    return value; the caller decides whether to go on. Anything that is not a
    driver error propagates.
    """
    logger.info('%s...', description)
    logger.debug('SQL: %s', _preview(statement))
    try:
        if params:
            connection.exec_driver_sql(statement, params)
        else:
            connection.exec_driver_sql(statement)
    except SQLAlchemyError as exc:
        error = StepError(description, driver_message(exc))
        logger.error('[FAIL] %s', error)
        if report is not None:
            report.failed.append(error)
        return False
    logger.info('[OK] %s - Success', description)
    if report is not None:
        report.succeeded.append(description)
    return True


def apply_schema(connection, tables=TABLES, report: StepReport | None = None) -> int:
    """Create every table in order. Returns the number of successful steps."""
    logger.info('STEP 1: Creating Tables...')
    created = 0
    for table in tables:
        if execute_step(connection, table.ddl, table.description, report=report):
            created += 1
    logger.info(RULE)
    return created


def apply_seeds(connection, batches=SEEDS, report: StepReport | None = None) -> int:
    """Upsert the reference rows, one multi-row statement per table."""
    logger.info('STEP 2: Inserting Data...')
    applied = 0
    for batch in batches:
        if execute_step(connection, batch.statement(), batch.description, params=batch.params(), report=report):
            applied += 1
    logger.info(RULE)
    return applied


def _label(table: str) -> str:
    return table.replace('_', ' ').title()


def _check_admin_credential(connection) -> bool:
    stored = connection.exec_driver_sql(
        'SELECT password_hash FROM admin_users WHERE username = %s',
        (SEED_ADMIN_USERNAME,),
    ).scalar()
    if stored is None:
        logger.warning("Admin user '%s' has no password hash", SEED_ADMIN_USERNAME)
        return False
    if not PASSWORD_HASH_RE.match(stored):
        logger.warning("Admin user '%s' password hash is not in salt:hash hex form", SEED_ADMIN_USERNAME)
        return False
    return True


def verify(connection) -> dict:
    """Print table and row counts for the seeded tables.

    Mismatches against the seed literals are warnings only. Driver errors are
    not caught here.
    """
    logger.info('STEP 3: Verification...')
    tables = {row[0] for row in connection.exec_driver_sql('SHOW TABLES').fetchall()}
    logger.info('Total tables created: %s', len(tables))
    missing = [name for name in TABLE_NAMES if name not in tables]
    if missing:
        logger.warning('Missing tables: %s', ', '.join(missing))

    counts = {}
    for table in EXPECTED_COUNTS:
        counts[table] = connection.exec_driver_sql(f'SELECT COUNT(*) FROM {table}').scalar()

    logger.info('Data Summary:')
    for table, count in counts.items():
        logger.info('   %s: %s', _label(table), count)
    for table, count in counts.items():
        expected = EXPECTED_COUNTS[table]
        if count != expected:
            logger.warning('%s has %s rows, expected %s', table, count, expected)

    _check_admin_credential(connection)
    return counts


def _print_summary(report: StepReport) -> None:
    logger.info(RULE)
    if report.failed:
        logger.warning('%s of %s steps failed:', len(report.failed), report.total)
        for error in report.failed:
            logger.warning('  - %s', error)
        logger.info('Database setup finished with errors.')
    else:
        logger.info('Database setup completed successfully!')
    logger.info(RULE)
    logger.info('Next steps:')
    logger.info('   1. Start the admin backend server')
    logger.info('   2. Login with: %s / (check password in database)', SEED_ADMIN_USERNAME)
    logger.info('   3. Add category keywords via migration if needed')


def run(config: DatabaseConfig, report: StepReport | None = None) -> int:
    """Run the whole bootstrap. Returns the process exit status.

    Per-step outcomes are collected into ``report`` when one is passed.
    """
    logger.info('Starting Complete Database Setup...')
    logger.info('Database: %s', config.database)
    logger.info('Host: %s:%s', config.host, config.port)
    logger.info(RULE)

    if report is None:
        report = StepReport()
    try:
        ensure_database(config)
        with bound_session(config) as connection:
            logger.info(RULE)
            apply_schema(connection, report=report)
            apply_seeds(connection, report=report)
            verify(connection)
    except ConnectError as exc:
        logger.exception('Fatal Error: %s', exc)
        if exc.hint:
            logger.error('Suggestion: %s', exc.hint)
        return 1
    except Exception as exc:
        logger.exception('Fatal Error: %s', exc)
        return 1

    _print_summary(report)
    return 0


def main() -> int:
    load_env_file()
    configure_logging()
    try:
        config = load_config()
    except ConfigError as exc:
        logger.error('Configuration error: %s', exc)
        return 1
    return run(config)


if __name__ == '__main__':
    sys.exit(main())
