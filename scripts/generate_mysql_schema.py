"""Export the full bootstrap (schema and seed rows) as a MySQL script.

Useful on hosts where the bootstrap cannot reach the server directly; import
the file through phpMyAdmin or the mysql client instead.

Usage:
  python scripts/generate_mysql_schema.py
"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.dialects import mysql

from config import load_config, load_env_file
from schema import TABLES
from seeds import SEEDS

OUT_FILE = Path('SHOPEE_AFFILIATE_FULL_SETUP.sql')


def render_script(database: str) -> str:
    quoted = mysql.dialect().identifier_preparer.quote_identifier(database)
    lines = [
        '-- Shopee affiliate admin database: full schema and reference data',
        '-- Generated automatically from schema.py and seeds.py.',
        'SET NAMES utf8mb4;',
        '',
        f'CREATE DATABASE IF NOT EXISTS {quoted} CHARACTER SET utf8mb4;',
        f'USE {quoted};',
        '',
    ]
    for table in TABLES:
        lines.append(f'-- {table.description}')
        lines.append(table.ddl.strip() + ';')
        lines.append('')
    for batch in SEEDS:
        lines.append(f'-- {batch.description}')
        lines.append(batch.as_sql() + ';')
        lines.append('')
    return '\n'.join(lines)


def main(out_file: Path = OUT_FILE) -> None:
    load_env_file()
    config = load_config()
    out_file.write_text(render_script(config.database), encoding='utf-8')
    print(f'Wrote {out_file}')


if __name__ == '__main__':
    main()
