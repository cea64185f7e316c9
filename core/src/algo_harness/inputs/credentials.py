"""
Database credentials in PGPASS layout.

Only the first line is used: ``host:port:database:user:password``. The password is
everything after the fourth colon and may contain colons itself.
"""

from __future__ import annotations

import logging
from pathlib import Path

from algo_harness.errors import CredentialsParseError
from algo_harness.inputs.settings import DatabaseConnectionSetting, DbSystem

logger = logging.getLogger("algo_harness.inputs.credentials")

DEFAULT_DB_TYPE = "postgres"

_DB_SYSTEMS = {
    "postgres": DbSystem.POSTGRESQL,
    "postgresql": DbSystem.POSTGRESQL,
    "mysql": DbSystem.MYSQL,
}


def parse_pgpass(content: str, db_type: str | None = None) -> DatabaseConnectionSetting:
    lines = content.splitlines()
    if not lines or not lines[0].strip():
        raise CredentialsParseError("Could not load PGPass file: no credentials line.")

    parts = lines[0].split(":", 4)
    if len(parts) < 5:
        raise CredentialsParseError(
            "Cannot parse PGPass file: expected host:port:db:user:password."
        )
    host, port, database, user, password = parts

    tag = db_type or DEFAULT_DB_TYPE
    url = f"{tag}://{host}:{port}/{database}"
    system = _DB_SYSTEMS.get(tag.lower())
    if system is None:
        # Unknown types keep their literal URL but are labelled PostgreSQL.
        logger.warning("Unknown database type %r; classifying connection as PostgreSQL", tag)
        system = DbSystem.POSTGRESQL

    return DatabaseConnectionSetting(
        url=url,
        user=user,
        password=password,
        system=system,
        host=host,
        port=port,
        database=database,
    )


def load_pgpass(path: str | Path, db_type: str | None = None) -> DatabaseConnectionSetting:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CredentialsParseError(f"Could not load PGPass file {path}: {exc}") from exc
    return parse_pgpass(content, db_type)
