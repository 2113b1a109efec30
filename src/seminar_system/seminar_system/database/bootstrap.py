"""Schema/seed helpers used on startup (AUTO_INIT_DB) and by scripts/."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DBConfig

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parents[4] / "database"
SCHEMA_PATH = SQL_DIR / "schema.sql"
SEED_PATH = SQL_DIR / "seed.sql"


def as_db_config(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "seminar_db")),
        connection_timeout=int(db_config.get("connection_timeout", 5)),
    )


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connection_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _without_db_selection(sql: str) -> str:
    # schema.sql stays usable whatever DB_NAME points at.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def split_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings and '--' comments."""

    current: list[str] = []
    quote = ""
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            current.append(ch)
            if ch == "\\" and i + 1 < len(sql):
                current.append(sql[i + 1])
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
            current.append(ch)
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end == -1 else end
            continue
        elif ch == ";":
            statement = "".join(current).strip()
            current = []
            if statement:
                yield statement
        else:
            current.append(ch)
        i += 1

    statement = "".join(current).strip()
    if statement:
        yield statement


def ensure_database_exists(db_config: dict) -> None:
    target = as_db_config(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def run_script(db_config: dict, *, path: str | Path) -> int:
    sql = _without_db_selection(Path(path).read_text(encoding="utf-8"))
    conn = _connect(as_db_config(db_config))
    count = 0
    try:
        cur = conn.cursor()
        for statement in split_statements(sql):
            cur.execute(statement)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    count = run_script(db_config, path=schema_path)
    logger.info("Schema applied (%d statements)", count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    count = run_script(db_config, path=seed_path)
    logger.info("Seed applied (%d statements)", count)


def ensure_admin_user(db_config: dict, *, email: str, password: str, name: str = "Administrator") -> None:
    """Create or reset the bootstrap admin account."""

    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO users (name, email, password_hash, role)
            VALUES (%s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE name=VALUES(name), password_hash=VALUES(password_hash),
                                    role=VALUES(role), is_blocked=0
            """,
            (name, email.strip().lower(), generate_password_hash(password), Role.ADMIN.value),
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
