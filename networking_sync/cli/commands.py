from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..errors import SyncError, WriteError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.config_models import SyncConfig
from ..models.error_record import ErrorRecord
from ..services.backup import dashboard_rows_as_dicts, write_backup
from ..services.orchestrator import run_preview, run_sync
from ..services.summary import render_stats_lines, render_summary_line
from ..sheets.client import SheetsClient

"""CLI entrypoint.

Commands:
- sync     append new onboarding people to the dashboard (asks first unless --force)
- preview  compute the same statistics without writing
- backup   dump the dashboard to a timestamped CSV file
- setup    print configuration help
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

SETUP_STEPS = (
    "1. Copy .env.example to .env (or write config/sync.yml)",
    "2. Fill in your Google service account credentials",
    "3. Add the onboarding form and networking dashboard spreadsheet ids",
    "4. Install the package: pip install -e .",
    "5. Test with: networking-sync preview",
    "6. Run networking-sync sync when ready",
)
SETUP_ENV_VARS = (
    "GOOGLE_APPLICATION_CREDENTIALS (or GOOGLE_CLIENT_EMAIL + GOOGLE_PRIVATE_KEY)",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_CLIENT_ID",
    "ONBOARDING_FORM_FILE_ID",
    "NETWORKING_DASHBOARD_FILE_ID",
    "ONBOARDING_SHEET_NAME / NETWORKING_SHEET_NAME (optional)",
    "ONBOARDING_SHEET_RANGE / NETWORKING_SHEET_RANGE (optional, default A:Z)",
)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv (values in .env win over the process env)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="networking-sync",
        description="Onboarding form -> networking dashboard synchronization",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
    sub = p.add_subparsers(dest="command", required=True)
    sync_p = sub.add_parser("sync", help="Synchronize onboarding form data with networking dashboard")
    sync_p.add_argument("-f", "--force", action="store_true", help="Skip confirmation prompt")
    sub.add_parser("preview", help="Preview what the sync would do without making changes")
    backup_p = sub.add_parser("backup", help="Save the networking dashboard to a CSV file")
    backup_p.add_argument("--output-dir", type=Path, default=None, help="Backup directory")
    sub.add_parser("setup", help="Help with initial setup and configuration")
    return p.parse_args(argv)


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _print_setup() -> int:
    print("Setup steps:")
    for step in SETUP_STEPS:
        print(f"  {step}")
    print("Required environment variables (or config/sync.yml keys):")
    for var in SETUP_ENV_VARS:
        print(f"  - {var}")
    print("Share both spreadsheets with the service account email before running.")
    return EXIT_SUCCESS


def _report_failure(logger, error_log: ErrorLogBuffer, kind: str, e: SyncError) -> int:
    logger.error(f"{kind}: {e}")
    if isinstance(e, WriteError):
        logger.error("rows_written=0")
    error_log.append(
        ErrorRecord.create(
            spreadsheet=e.spreadsheet,
            sheet=e.sheet or "<RUN_LEVEL>",
            row=-1,
            error_type=e.error_type,
            message=str(e),
        )
    )
    path = error_log.flush()
    if path is not None:
        logger.info(f"error log written: {path}")
    return EXIT_FATAL


def _run_backup(cfg: SyncConfig, client: SheetsClient, output_dir: Path | None, logger) -> int:
    rows = client.fetch_rows(cfg.networking)
    headers, data = (rows[0], rows[1:]) if rows else ([], [])
    records = dashboard_rows_as_dicts(headers, data)
    directory = output_dir or Path(cfg.backup_directory)
    try:
        path = write_backup(records, directory)
    except OSError as e:
        raise WriteError(
            f"could not write backup to {directory}: {e}",
            spreadsheet=cfg.networking.spreadsheet_id,
            sheet=cfg.networking.label,
        ) from e
    if path is not None:
        logger.info(f"backed up {len(records)} entries to {path}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] は明示指定として扱う (None のときのみ sys.argv を読む)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    if args.command == "setup":
        return _print_setup()

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "sync" and not args.force:
        if not _confirm("This will update your networking dashboard. Continue?"):
            logger.warning("sync cancelled by user")
            return EXIT_SUCCESS

    error_log = ErrorLogBuffer()
    try:
        client = SheetsClient.from_config(cfg.credentials)
        if args.command == "backup":
            return _run_backup(cfg, client, args.output_dir, logger)
        if args.command == "preview":
            result = run_preview(cfg, client)
        else:
            result = run_sync(cfg, client, client)
    except SyncError as e:
        return _report_failure(logger, error_log, args.command, e)

    preview = result.mode == "preview"
    logger.info(result.message)
    for line in render_stats_lines(result.stats, preview=preview):
        logger.info(line)
    # log_summary が "SUMMARY " を付けるので先頭を除去
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS
