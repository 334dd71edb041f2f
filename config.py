import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE = Path(__file__).resolve().parent / '.env'

DEFAULT_HOST = 'localhost'
DEFAULT_USER = 'root'
DEFAULT_PASSWORD = ''
DEFAULT_PORT = 3306
DEFAULT_DATABASE = 'shopee_affiliate'

_TRUTHY = {'1', 'true', 'yes', 'on'}


class ConfigError(ValueError):
    """Raised when an environment value cannot be used as configuration."""


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection parameters for the bootstrap run."""

    host: str = DEFAULT_HOST
    user: str = DEFAULT_USER
    password: str = DEFAULT_PASSWORD
    port: int = DEFAULT_PORT
    database: str = DEFAULT_DATABASE

    def describe(self) -> str:
        return f'{self.host}:{self.port}/{self.database} as {self.user}'


def load_env_file(path: Path | str | None = None) -> bool:
    """Load the bootstrap's ``.env`` file without overriding the environment.

    Returns True when a file was found and read.
    """
    env_path = Path(path) if path else ENV_FILE
    if not env_path.is_file():
        return False
    load_dotenv(env_path, override=False)
    return True


def _parse_port(raw: str | None) -> int:
    value = (raw or '').strip()
    if not value:
        return DEFAULT_PORT
    if not value.isdecimal():
        raise ConfigError(f'DB_PORT must be numeric, got {raw!r}')
    return int(value)


def load_config(environ=None) -> DatabaseConfig:
    """Build a :class:`DatabaseConfig` from ``DB_*`` environment variables.

    Unset or empty variables fall back to the defaults. Only a non-numeric
    ``DB_PORT`` is rejected.
    """
    env = os.environ if environ is None else environ
    return DatabaseConfig(
        host=env.get('DB_HOST') or DEFAULT_HOST,
        user=env.get('DB_USER') or DEFAULT_USER,
        password=env.get('DB_PASSWORD') or DEFAULT_PASSWORD,
        port=_parse_port(env.get('DB_PORT')),
        database=env.get('DB_NAME') or DEFAULT_DATABASE,
    )


def sql_debug_enabled(environ=None) -> bool:
    env = os.environ if environ is None else environ
    return (env.get('DEBUG_SQL') or '').strip().lower() in _TRUTHY
