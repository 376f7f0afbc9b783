#!/usr/bin/env python3
"""
Export a seed file as a backup document, or validate a backup file.

Usage:
    python3 scripts/backup_tool.py export --seed stock_config/fixtures/seed.yaml
    python3 scripts/backup_tool.py export --seed seed.yaml --out backup.json
    python3 scripts/backup_tool.py validate backup.json

Validation restores the file into an empty in-memory store, exactly as the
dashboard's import button would, and reports what it contained.
"""

import argparse
import sys
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from stock_config import get_active_config, load_seed  # noqa: E402
from stock_config.bridges import build_kernel  # noqa: E402
from stock_kernel.exceptions import InvalidBackupFormatError  # noqa: E402
from stock_kernel.logging_config import configure_logging  # noqa: E402


def _export(args, config) -> int:
    try:
        snapshot = load_seed(args.seed)
    except FileNotFoundError:
        print(f"  ERROR: seed file not found: {args.seed}", file=sys.stderr)
        return 1
    except (yaml.YAMLError, KeyError, TypeError, ValueError) as exc:
        print(f"  ERROR: invalid seed file {args.seed}: {exc!r}", file=sys.stderr)
        return 1

    kernel = build_kernel(config, snapshot=snapshot)
    out = args.out or Path.cwd() / kernel.backup.backup_filename()
    out.write_text(kernel.backup.export_json(), encoding="utf-8")

    counts = snapshot.counts()
    print(f"Wrote {out}")
    print(f"  stock items: {counts['stock_items']}, users: {counts['users']}, "
          f"suppliers: {counts['suppliers']}")
    return 0


def _validate(args, config) -> int:
    try:
        raw = args.path.read_bytes()
    except FileNotFoundError:
        print(f"  ERROR: backup file not found: {args.path}", file=sys.stderr)
        return 1

    kernel = build_kernel(config)
    try:
        snapshot = kernel.backup.restore_all(raw)
    except InvalidBackupFormatError as exc:
        print(f"  {exc.code}: {exc.reason}", file=sys.stderr)
        return 1

    print(f"OK {args.path}")
    for name, count in snapshot.counts().items():
        print(f"  {name}: {count}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export or validate stock dashboard backup documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/backup_tool.py export --seed stock_config/fixtures/seed.yaml\n"
            "  python3 scripts/backup_tool.py validate backup.json\n"
        ),
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Settings YAML (default: stock_config/settings.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Write a seed file out as a backup document")
    export.add_argument("--seed", type=Path, required=True, help="Seed YAML or JSON file")
    export.add_argument(
        "--out", type=Path, default=None,
        help="Output path (default: <prefix>-<timestamp>.json in the working directory)",
    )

    validate = sub.add_parser("validate", help="Check that a backup file restores cleanly")
    validate.add_argument("path", type=Path, help="Backup JSON file")

    args = parser.parse_args(argv)

    try:
        config = get_active_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"  ERROR: cannot load settings: {exc}", file=sys.stderr)
        return 1
    configure_logging(level=config.log_level.upper())

    if args.command == "export":
        return _export(args, config)
    return _validate(args, config)


if __name__ == "__main__":
    sys.exit(main())
