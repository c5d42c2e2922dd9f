from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from phagemap.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, default_config, load_config
from phagemap.db.excel_data_store import ExcelDataStore, StoreError
from phagemap.excel.errors import WorkbookError
from phagemap.logging.error_log import ErrorLogBuffer
from phagemap.logging.init import log_summary, set_debug, setup_logging
from phagemap.services.importer import ImportProcessError, import_files, scan_workbooks
from phagemap.services.parser import parse_interaction_workbook
from phagemap.services.summary import render_summary_line
from phagemap.services.upload import UploadPolicy, list_uploads, rename_upload

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (defaults when the default path is absent)
- Collect workbooks (arguments, or source_directory from config)
- --inspect: parse and print, store nothing
- otherwise parse and store each workbook (live DB, or in-memory with
  --dry-run / DISABLE_DB_CONNECT=1), then print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

INSPECT_PREVIEW_ROWS = 5


@contextmanager
def _db_connection(cfg: AppConfig) -> Iterator[Any]:  # pragma: no cover (needs a server)
    """Yield a psycopg2 cursor.

    Resolution order: DATABASE_URL / PGDSN, config dsn, then PGHOST / PGPORT /
    PGUSER / PGPASSWORD / PGDATABASE with config values as fallback.
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    conn.autocommit = True  # importer issues BEGIN/COMMIT per file
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="phagemap", description="Phage host-range workbook importer"
    )
    p.add_argument("files", nargs="*", type=Path, help="Workbooks to import (default: source_directory)")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect", action="store_true", help="Parse and print matrices, store nothing")
    p.add_argument("--dry-run", action="store_true", help="Use an in-memory store instead of the database")
    p.add_argument("--list", action="store_true", help="List stored files and exit")
    p.add_argument("--rename", nargs=2, metavar=("OLD", "NEW"), help="Rename a stored file and exit")
    return p.parse_args(argv)


def _resolve_config(path: Path | None) -> AppConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return default_config()
        path = DEFAULT_CONFIG_PATH
    return load_config(path)


def _collect_files(args: argparse.Namespace, cfg: AppConfig) -> list[Path]:
    if args.files:
        return list(args.files)
    if not cfg.source_directory:
        raise ImportProcessError("no input files given and no source_directory configured")
    return scan_workbooks(Path(cfg.source_directory), cfg.upload.allowed_extensions)


def _inspect(files: list[Path]) -> int:
    code = EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            parsed = parse_interaction_workbook(f.read_bytes())
        except (WorkbookError, OSError) as e:
            print(f"  error: {e}")
            code = EXIT_PARTIAL_FAILURE
            continue
        rows, cols = parsed.shape
        print(f"  shape={rows}x{cols} positives={parsed.positive_count}")
        print(f"  phages={list(parsed.phage_names)}")
        for name, values in list(parsed.rows())[:INSPECT_PREVIEW_ROWS]:
            print(f"    {name}: {list(values)}")
    return code


def _run_with_store(args: argparse.Namespace, cfg: AppConfig, store: ExcelDataStore) -> int:
    logger = setup_logging()

    if args.list:
        resp = list_uploads(store)
        if not resp.ok:
            logger.error(resp.message)
            return EXIT_FATAL
        for rec in resp.data["files"]:
            print(f"{rec['id']}\t{rec['fileName']}\t{len(rec['bacteria'])}x{len(rec['phages'])}\t{rec['createdAt']}")
        return EXIT_SUCCESS_ALL

    if args.rename:
        old, new = args.rename
        resp = rename_upload(store, old, new)
        if resp.ok:
            logger.info(resp.message)
            return EXIT_SUCCESS_ALL
        logger.error(resp.message)
        return EXIT_FATAL

    try:
        files = _collect_files(args, cfg)
    except ImportProcessError as e:
        logger.error(str(e))
        return EXIT_FATAL

    result = import_files(files, store, UploadPolicy.from_config(cfg.upload), ErrorLogBuffer())
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))
    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect:
        try:
            files = _collect_files(args, cfg)
        except ImportProcessError as e:
            logger.error(str(e))
            return EXIT_FATAL
        return _inspect(files)

    if args.dry_run or os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("database disabled -> in-memory store")
        return _run_with_store(args, cfg, ExcelDataStore(cursor=None, table=cfg.database.table))

    try:
        with _db_connection(cfg) as cur:
            store = ExcelDataStore(cursor=cur, table=cfg.database.table)
            store.ensure_table()
            return _run_with_store(args, cfg, store)
    except (psycopg2.Error, StoreError) as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL
