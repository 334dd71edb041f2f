"""End-to-end bootstrap runs against a real MySQL server.

Set MYSQL_TEST_HOST (and optionally MYSQL_TEST_PORT, MYSQL_TEST_USER,
MYSQL_TEST_PASSWORD, MYSQL_TEST_DATABASE) to enable. The test schema is
dropped before and after every test.
"""
import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

if not os.getenv('MYSQL_TEST_HOST'):
    pytest.skip('MYSQL_TEST_HOST not set', allow_module_level=True)

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

import setup_database
from config import DatabaseConfig
from connector import bound_session, build_url
from schema import TABLE_NAMES, TABLES
from seeds import EXPECTED_COUNTS, SEEDS
from setup_database import StepReport, apply_schema


@pytest.fixture
def config():
    cfg = DatabaseConfig(
        host=os.environ['MYSQL_TEST_HOST'],
        user=os.getenv('MYSQL_TEST_USER', 'root'),
        password=os.getenv('MYSQL_TEST_PASSWORD', ''),
        port=int(os.getenv('MYSQL_TEST_PORT', '3306')),
        database=os.getenv('MYSQL_TEST_DATABASE', 'shopee_affiliate_bootstrap_test'),
    )
    _drop_schema(cfg)
    yield cfg
    _drop_schema(cfg)


def _server_engine(cfg):
    return create_engine(build_url(cfg, with_database=False), poolclass=NullPool, isolation_level='AUTOCOMMIT')


def _drop_schema(cfg):
    engine = _server_engine(cfg)
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql(f'DROP DATABASE IF EXISTS `{cfg.database}`')
    finally:
        engine.dispose()


def _counts(conn):
    return {table: conn.exec_driver_sql(f'SELECT COUNT(*) FROM {table}').scalar() for table in EXPECTED_COUNTS}


def _snapshot(conn):
    rows = {}
    for batch in SEEDS:
        order_by = ', '.join(batch.key)
        rows[batch.table] = conn.exec_driver_sql(f'SELECT * FROM {batch.table} ORDER BY {order_by}').fetchall()
    return rows


def test_cold_start(config):
    assert setup_database.run(config) == 0

    with bound_session(config) as conn:
        tables = {row[0] for row in conn.exec_driver_sql('SHOW TABLES').fetchall()}
        assert tables == set(TABLE_NAMES)
        assert _counts(conn) == EXPECTED_COUNTS


def test_warm_start_is_idempotent(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        first = _snapshot(conn)

    report = StepReport()
    assert setup_database.run(config, report=report) == 0
    assert report.failed == []
    assert report.total == 24
    with bound_session(config) as conn:
        assert _counts(conn) == EXPECTED_COUNTS
        assert _snapshot(conn) == first


def test_referenced_seed_row_is_reverted(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql("UPDATE banner_positions SET name = 'Moved', width = 1 WHERE id = 5")

    report = StepReport()
    assert setup_database.run(config, report=report) == 0
    assert report.failed == []
    with bound_session(config) as conn:
        row = conn.exec_driver_sql('SELECT name, width FROM banner_positions WHERE id = 5').fetchone()
        banners = conn.exec_driver_sql('SELECT COUNT(*) FROM banners WHERE position_id = 5').scalar()
    assert tuple(row) == ('Flash Sale Banner', 1200)
    assert banners > 0


def test_rows_pointing_at_seeded_keys_survive_rerun(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql("INSERT INTO category_keywords (category_id, keyword) VALUES (7, 'serum')")
        conn.exec_driver_sql("INSERT INTO shopee_products (item_id, product_name, category_id) VALUES ('900001', 'Serum', 7)")
        conn.exec_driver_sql('INSERT INTO role_permissions (role_id, permission_id) VALUES (3, 3)')

    report = StepReport()
    assert setup_database.run(config, report=report) == 0
    assert report.failed == []
    with bound_session(config) as conn:
        keywords = conn.exec_driver_sql('SELECT keyword FROM category_keywords WHERE category_id = 7').fetchall()
        category_id = conn.exec_driver_sql(
            "SELECT category_id FROM shopee_products WHERE item_id = '900001'"
        ).scalar()
        grant = conn.exec_driver_sql(
            'SELECT COUNT(*) FROM role_permissions WHERE role_id = 3 AND permission_id = 3'
        ).scalar()
    assert [row[0] for row in keywords] == ['serum']
    assert category_id == 7
    assert grant == 1


def test_mutated_seed_row_is_reverted(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql("UPDATE roles SET name = 'Hacked' WHERE id = 1")

    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        assert conn.exec_driver_sql('SELECT name FROM roles WHERE id = 1').scalar() == 'Super Admin'


def test_rows_outside_seed_are_preserved(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql("INSERT INTO categories (id, name) VALUES (99, 'Test')")
        conn.exec_driver_sql("UPDATE categories SET name = 'Gadgets' WHERE id = 8")

    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        names = dict(conn.exec_driver_sql('SELECT id, name FROM categories').fetchall())
    assert names[99] == 'Test'
    assert names[8] == 'Electronics'
    assert set(names) == {7, 8, 9, 10, 11, 12, 14, 99}


def test_admin_credential_format(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        stored = conn.exec_driver_sql(
            'SELECT password_hash, password, role_id FROM admin_users WHERE username = %s', ('admin',)
        ).fetchone()
    assert setup_database.PASSWORD_HASH_RE.match(stored[0])
    assert stored[1] is None
    assert stored[2] == 1


def test_role_delete_clears_user_role(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql('DELETE FROM roles WHERE id = 3')
        row = conn.exec_driver_sql("SELECT role_id FROM admin_users WHERE username = 'editor'").fetchone()
        remaining = conn.exec_driver_sql('SELECT COUNT(*) FROM role_permissions WHERE role_id = 3').scalar()
    assert row is not None
    assert row[0] is None
    assert remaining == 0


def test_existing_schema_is_kept(config):
    engine = _server_engine(config)
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql(f'CREATE DATABASE `{config.database}`')
            conn.exec_driver_sql(f'CREATE TABLE `{config.database}`.marker (id INT PRIMARY KEY)')
    finally:
        engine.dispose()

    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        tables = {row[0] for row in conn.exec_driver_sql('SHOW TABLES').fetchall()}
    assert 'marker' in tables
    assert set(TABLE_NAMES) <= tables


def test_missing_parent_table_fails_dependents_only(config):
    setup_database.ensure_database(config)
    report = StepReport()
    without_roles = [table for table in TABLES if table.name != 'roles']

    with bound_session(config) as conn:
        created = apply_schema(conn, tables=without_roles, report=report)

    # admin_activity_logs depends on admin_users, which cannot be created either
    assert created == 11
    assert sorted(error.description for error in report.failed) == [
        'Create admin_activity_logs table',
        'Create admin_users table',
        'Create role_permissions table',
    ]


def test_keyword_collation_folds_case_and_accents(config):
    assert setup_database.run(config) == 0
    with bound_session(config) as conn:
        conn.exec_driver_sql("INSERT INTO category_keywords (category_id, keyword) VALUES (7, 'Café')")
        found = conn.exec_driver_sql(
            "SELECT COUNT(*) FROM category_keywords WHERE keyword = 'cafe'"
        ).scalar()
        assert found == 1
        with pytest.raises(IntegrityError):
            conn.exec_driver_sql("INSERT INTO category_keywords (category_id, keyword) VALUES (7, 'CAFE')")
