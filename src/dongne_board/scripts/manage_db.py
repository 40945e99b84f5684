"""Command-line helpers to prepare the configured database.

Usage::

    python -m dongne_board.scripts.manage_db ensure    # create the Postgres database if missing
    python -m dongne_board.scripts.manage_db migrate   # alembic upgrade head
    python -m dongne_board.scripts.manage_db reset     # drop every table, then migrate
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

import psycopg
from alembic import command
from alembic.config import Config
from psycopg import sql

from dongne_board.core.settings import settings

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def is_postgres(uri: str) -> bool:
    return uri.strip().strip("'\"").startswith(("postgresql", "postgres://"))


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    Strips quotes and whitespace and converts SQLAlchemy schemes such as
    ``postgresql+psycopg`` to plain ``postgresql``.
    """
    uri = (uri or "").strip()
    if len(uri) >= 2 and uri[0] == uri[-1] and uri[0] in "'\"":
        uri = uri[1:-1]
    if not uri:
        raise ValueError("DATABASE_URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+") or scheme == "postgres":
        scheme = "postgresql"
    if scheme != "postgresql":
        raise ValueError(f"Not a Postgres URL: {uri!r}")
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def split_db_url(db_url: str) -> tuple[str, str]:
    """Return ``(admin_url, target_db)`` using the ``postgres`` maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"
    if parts.netloc:
        admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))
    else:
        # hostless/local-socket style
        admin_url = "postgresql:///postgres"
    return admin_url, target_db


def ensure_database_exists(db_url: str) -> bool:
    """Create the configured Postgres database if it is missing.

    Returns True when the database was created.
    """
    admin_url, target_db = split_db_url(db_url)
    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is not None:
            print(f"[manage_db] database {target_db} already exists")
            return False
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
    print(f"[manage_db] created database {target_db}")
    return True


def alembic_config(db_url: str) -> Config:
    """Build an Alembic config pointing at the project's migrations."""
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run_upgrade_head(db_url: str) -> None:
    command.upgrade(alembic_config(db_url), "head")
    print("[manage_db] schema is at head")


def reset_database(db_url: str) -> None:
    """Downgrade to base and upgrade again, leaving an empty schema."""
    cfg = alembic_config(db_url)
    command.downgrade(cfg, "base")
    command.upgrade(cfg, "head")
    print("[manage_db] database reset")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Prepare the Dongne Board database")
    parser.add_argument("action", choices=["ensure", "migrate", "reset"])
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to DATABASE_URL)",
    )
    args = parser.parse_args(argv)

    db_url = args.url or settings.database_url_sync
    try:
        if args.action == "ensure":
            if is_postgres(db_url):
                ensure_database_exists(db_url)
            else:
                print("[manage_db] not a Postgres URL; nothing to create")
        elif args.action == "migrate":
            run_upgrade_head(db_url)
        else:
            reset_database(db_url)
    except (psycopg.Error, ValueError) as exc:
        print(f"[manage_db] ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
