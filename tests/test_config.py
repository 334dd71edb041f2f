import dataclasses
import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from config import ConfigError, DatabaseConfig, load_config, load_env_file, sql_debug_enabled


def test_load_config_uses_defaults_for_empty_environment():
    cfg = load_config({})
    assert cfg == DatabaseConfig(
        host='localhost',
        user='root',
        password='',
        port=3306,
        database='shopee_affiliate',
    )


def test_load_config_reads_db_variables(monkeypatch):
    monkeypatch.setenv('DB_HOST', 'db.internal')
    monkeypatch.setenv('DB_USER', 'bootstrap')
    monkeypatch.setenv('DB_PASSWORD', 'my pass@123')
    monkeypatch.setenv('DB_PORT', '3307')
    monkeypatch.setenv('DB_NAME', 'affiliate_staging')

    cfg = load_config()

    assert cfg.host == 'db.internal'
    assert cfg.user == 'bootstrap'
    assert cfg.password == 'my pass@123'
    assert cfg.port == 3307
    assert cfg.database == 'affiliate_staging'


def test_blank_port_falls_back_to_default():
    assert load_config({'DB_PORT': ''}).port == 3306
    assert load_config({'DB_PORT': '   '}).port == 3306


@pytest.mark.parametrize('raw', ['abc', '33o6', '-1', '3306.0', '²'])
def test_non_numeric_port_is_rejected(raw):
    with pytest.raises(ConfigError, match='DB_PORT must be numeric'):
        load_config({'DB_PORT': raw})


def test_config_record_is_immutable():
    cfg = load_config({})
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.port = 1


def test_describe_never_includes_password():
    cfg = DatabaseConfig(password='s3cret')
    assert 's3cret' not in cfg.describe()
    assert cfg.describe() == 'localhost:3306/shopee_affiliate as root'


def test_env_file_does_not_override_existing_variables(tmp_path, monkeypatch):
    env_file = tmp_path / '.env'
    env_file.write_text('DB_HOST=from-file\nDB_NAME=file_db\n', encoding='utf-8')
    monkeypatch.setenv('DB_HOST', 'from-env')
    # register DB_NAME with monkeypatch so the value loaded from the file is undone
    monkeypatch.setenv('DB_NAME', 'placeholder')
    monkeypatch.delenv('DB_NAME')

    assert load_env_file(env_file) is True
    cfg = load_config()

    assert cfg.host == 'from-env'
    assert cfg.database == 'file_db'


def test_missing_env_file_is_ignored(tmp_path):
    assert load_env_file(tmp_path / 'missing.env') is False


def test_env_file_with_only_comments_counts_as_read(tmp_path):
    env_file = tmp_path / '.env'
    env_file.write_text('# nothing configured yet\n', encoding='utf-8')
    assert load_env_file(env_file) is True


def test_sql_debug_flag():
    assert sql_debug_enabled({'DEBUG_SQL': 'true'}) is True
    assert sql_debug_enabled({'DEBUG_SQL': ' 1 '}) is True
    assert sql_debug_enabled({'DEBUG_SQL': 'false'}) is False
    assert sql_debug_enabled({}) is False
