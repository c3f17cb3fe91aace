"""
Bible DB Migration Runner

Handles database schema migrations with:
- Version tracking in migrations table
- Checksum validation
- Migration history
- Dry-run support

Usage:
    python -m utils.run_migrations [--dry-run] [--validate] [--status] [--db PATH]
"""

import argparse
import hashlib
import os
import sys
from datetime import datetime

from utils.db import get_db


MIGRATIONS_DIR = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "migrations"
)


def get_file_checksum(filepath: str) -> str:
    """Calculate MD5 checksum of a migration file."""
    with open(filepath, "rb") as f:
        return hashlib.md5(f.read()).hexdigest()


def ensure_migrations_table(conn):
    """Create the migrations tracking table if it doesn't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS migrations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            version INTEGER NOT NULL,
            name TEXT NOT NULL,
            checksum TEXT,
            applied_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(version)
        )
    """)
    conn.commit()


def get_applied_migrations(conn) -> dict:
    """Get all applied migrations as {version: {name, checksum, applied_at}}."""
    ensure_migrations_table(conn)
    cur = conn.execute(
        "SELECT version, name, checksum, applied_at FROM migrations ORDER BY version"
    )
    return {
        row["version"]: {
            "name": row["name"],
            "checksum": row["checksum"],
            "applied_at": row["applied_at"]
        }
        for row in cur.fetchall()
    }


def get_migration_files() -> list:
    """Get list of migration files sorted by version."""
    if not os.path.isdir(MIGRATIONS_DIR):
        return []

    migrations = []
    for filename in os.listdir(MIGRATIONS_DIR):
        if not filename.endswith(".sql"):
            continue

        try:
            version = int(filename.split("_")[0])
        except (ValueError, IndexError):
            print(f"Warning: Skipping invalid migration filename: {filename}")
            continue

        filepath = os.path.join(MIGRATIONS_DIR, filename)
        migrations.append({
            "version": version,
            "name": filename,
            "path": filepath,
            "checksum": get_file_checksum(filepath)
        })

    return sorted(migrations, key=lambda m: m["version"])


def run(dry_run: bool = False, db_path: str = None, quiet: bool = False) -> bool:
    """
    Run pending migrations.

    Args:
        dry_run: If True, only show what would be done without applying.
        db_path: Database file (defaults to BIBLE_DB_PATH).
        quiet: Suppress progress output.

    Returns:
        True if successful, False if errors occurred.
    """
    say = (lambda *a, **k: None) if quiet else print
    conn = get_db(db_path)

    try:
        applied = get_applied_migrations(conn)
        pending = [m for m in get_migration_files() if m["version"] not in applied]

        if not pending:
            say("No pending migrations.")
            return True

        say(f"Found {len(pending)} pending migration(s):")
        for m in pending:
            say(f"  - {m['name']}")

        if dry_run:
            say("\nDry run - no changes applied.")
            return True

        for migration in pending:
            say(f"Applying: {migration['name']}...")

            try:
                with open(migration["path"], "r", encoding="utf-8") as f:
                    sql = f.read()

                conn.executescript(sql)

                conn.execute(
                    """
                    INSERT INTO migrations (version, name, checksum, applied_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        migration["version"],
                        migration["name"],
                        migration["checksum"],
                        datetime.now().isoformat()
                    )
                )
                conn.commit()
                say("  Applied successfully.")

            except Exception as e:
                print(f"  ERROR: {e}")
                conn.rollback()
                return False

        say("\nAll migrations applied successfully.")
        return True

    finally:
        conn.close()


def validate(db_path: str = None) -> bool:
    """
    Validate migration state and checksums.

    Returns:
        True if valid, False if issues found.
    """
    conn = get_db(db_path)

    try:
        applied = get_applied_migrations(conn)
        all_migrations = get_migration_files()

        issues = []

        # Check for missing migration files
        migration_versions = {m["version"] for m in all_migrations}
        for version, info in applied.items():
            if version not in migration_versions:
                issues.append(
                    f"Missing file: Migration v{version} ({info['name']}) "
                    f"was applied but file not found"
                )

        # Check checksums
        for migration in all_migrations:
            if migration["version"] in applied:
                recorded = applied[migration["version"]]["checksum"]
                if recorded and recorded != migration["checksum"]:
                    issues.append(
                        f"Checksum mismatch: {migration['name']} "
                        f"(recorded: {recorded[:8]}..., current: {migration['checksum'][:8]}...)"
                    )

        if issues:
            print("Validation issues:")
            for issue in issues:
                print(f"  - {issue}")
            return False

        print("Migrations valid.")
        return True

    finally:
        conn.close()


def status(db_path: str = None):
    """Print applied and pending migrations."""
    conn = get_db(db_path)
    try:
        applied = get_applied_migrations(conn)
    finally:
        conn.close()

    for migration in get_migration_files():
        info = applied.get(migration["version"])
        mark = f"applied {info['applied_at']}" if info else "pending"
        print(f"  v{migration['version']:03d} {migration['name']}: {mark}")


def main():
    parser = argparse.ArgumentParser(description="Apply Bible DB schema migrations")
    parser.add_argument("--dry-run", action="store_true", help="Show pending migrations only")
    parser.add_argument("--validate", action="store_true", help="Check checksums of applied migrations")
    parser.add_argument("--status", action="store_true", help="List migration state")
    parser.add_argument("--db", default=None, help="Database path (default: BIBLE_DB_PATH)")
    args = parser.parse_args()

    if args.status:
        status(args.db)
        return 0
    if args.validate:
        return 0 if validate(args.db) else 1
    return 0 if run(dry_run=args.dry_run, db_path=args.db) else 1


if __name__ == "__main__":
    sys.exit(main())
