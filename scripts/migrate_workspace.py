"""
Data Migration Script: legacy shows -> Productions / Show Templates / Events

Migrates the flat legacy `shows` table of one workspace (or every workspace)
into the three-tier model. Each workspace runs in its own transaction;
a workspace that was already migrated is reported and skipped.

Legacy tables remain unchanged and available for reference.

Usage:
    python scripts/migrate_workspace.py <workspace_id>
    python scripts/migrate_workspace.py --all
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from crewer.database import AsyncSessionLocal, engine, Base
from crewer.models import Workspace
from crewer.services.migration import ArchitectureMigration, WorkspaceAlreadyMigratedError
from crewer.services.storage import MigrationStorage


class WorkspaceMigrationRunner:
    """Runs the legacy migration for a list of workspaces and keeps totals"""

    def __init__(self, workspace_ids: list[str]):
        self.workspace_ids = workspace_ids
        self.totals = {}
        self.skipped = []
        self.errors = []

    async def create_tables(self):
        """Make sure the three-tier tables exist"""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def migrate_all(self):
        print("=" * 60)
        print("LEGACY SHOW MIGRATION: shows -> productions / templates / events")
        print("=" * 60)

        await self.create_tables()

        for workspace_id in self.workspace_ids:
            await self.migrate_one(workspace_id)

        self.print_summary()

    async def migrate_one(self, workspace_id: str):
        print(f"\nMigrating workspace {workspace_id}...")
        async with AsyncSessionLocal() as session:
            migration = ArchitectureMigration(MigrationStorage(session))
            try:
                await migration.migrate_workspace(workspace_id)
            except WorkspaceAlreadyMigratedError:
                print("   Already migrated, skipping")
                self.skipped.append(workspace_id)
                return
            except Exception as e:
                print(f"   Migration failed: {e}")
                self.errors.append(f"{workspace_id}: {e}")
                return

        for key, value in migration.stats.items():
            self.totals[key] = self.totals.get(key, 0) + value
        print(f"   {migration.stats['legacy_shows']} legacy shows -> "
              f"{migration.stats['productions']} productions, "
              f"{migration.stats['templates']} templates, "
              f"{migration.stats['events']} events")

    def print_summary(self):
        print("\n" + "=" * 60)
        print("MIGRATION SUMMARY")
        print("=" * 60)
        for key, value in self.totals.items():
            print(f"   {key.replace('_', ' ').title():<25} {value}")
        if self.skipped:
            print(f"\n   Skipped (already migrated): {len(self.skipped)}")
        if self.errors:
            print(f"\n   Errors: {len(self.errors)}")
            for error in self.errors:
                print(f"   - {error}")


async def _all_workspace_ids() -> list[str]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Workspace.id).order_by(Workspace.created_at))
        return list(result.scalars().all())


async def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__)
        return 1

    workspace_ids = await _all_workspace_ids() if argv[1] == "--all" else [argv[1]]
    runner = WorkspaceMigrationRunner(workspace_ids)
    await runner.migrate_all()
    await engine.dispose()
    return 1 if runner.errors else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv)))
