from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DATABASE = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DATABASE = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        connection_timeout=config.connection_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def _portable(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    return _USE_DATABASE.sub("", _CREATE_DATABASE.sub("", sql))


def split_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted strings. ``--`` comments are dropped."""
    buf: list[str] = []
    quote: str | None = None
    escaped = False

    for line in sql.splitlines(keepends=True):
        if quote is None and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif quote:
                if ch == quote:
                    quote = None
            elif ch in ("'", '"'):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(config: DBConfig, statements: Iterable[str]) -> int:
    count = 0
    with closing(_connect(config)) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    with closing(_connect(config, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    config = DBConfig.from_mapping(db_config)
    sql = _portable(Path(schema_path).read_text(encoding="utf-8"))
    count = _run_script(config, split_statements(sql))
    logger.info("Applied %s schema statement(s) to %s", count, config.database)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    config = DBConfig.from_mapping(db_config)
    sql = _portable(Path(seed_path).read_text(encoding="utf-8"))
    count = _run_script(config, split_statements(sql))
    logger.info("Applied %s seed statement(s) to %s", count, config.database)


def list_tables(db_config: dict) -> list[str]:
    config = DBConfig.from_mapping(db_config)
    with closing(_connect(config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
