"""
Migration runner script.
Uses DATABASE_URL from environment variables.

    python -m catalog_import.db.migrations.migrate apply
"""
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

MIGRATIONS_DIR = Path(__file__).parent / 'versions'

COMMANDS = {
    'apply': ['apply'],
    'rollback': ['rollback'],
    'list': ['list'],
    'reapply': ['rollback', 'apply'],
}


def yoyo_command(command: str, database_url: str) -> List[str]:
    """Build the yoyo CLI invocation for one command."""
    return ['yoyo', command, '--batch', '--database', database_url, str(MIGRATIONS_DIR)]


def run_yoyo(command: str, database_url: str) -> int:
    """Run a yoyo command."""
    return subprocess.run(yoyo_command(command, database_url)).returncode


def print_usage() -> None:
    print("Usage:")
    print("  python -m catalog_import.db.migrations.migrate <command>")
    print("\nAvailable commands:")
    print("  apply     - Apply pending migrations")
    print("  rollback  - Rollback last migration")
    print("  list      - List migration status")
    print("  reapply   - Rollback and reapply last migration")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print_usage()
        return 1

    command = argv[0]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        return 1

    load_dotenv()
    database_url = os.getenv('DATABASE_URL')
    if not database_url:
        print("Error: DATABASE_URL not found in environment variables")
        return 1

    if not MIGRATIONS_DIR.exists():
        print(f"Error: Migrations directory not found at {MIGRATIONS_DIR}")
        return 1

    for step in COMMANDS[command]:
        returncode = run_yoyo(step, database_url)
        if returncode != 0:
            return returncode
    return 0


if __name__ == '__main__':
    sys.exit(main())
