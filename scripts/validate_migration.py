"""
Validation Script: verify a migrated workspace

Compares legacy shows and assignments with the migrated events and
assignments, and checks for orphans and cross-workspace references.

Usage:
    python scripts/validate_migration.py <workspace_id>
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from crewer.database import AsyncSessionLocal, engine
from crewer.models import Production, ShowTemplate
from crewer.services.migration_validation import validate_workspace_migration
from crewer.services.storage import MigrationStorage


async def validate_migration(workspace_id: str) -> bool:
    """Run validation checks and print the report"""
    print("=" * 60)
    print(f"MIGRATION VALIDATION: workspace {workspace_id}")
    print("=" * 60)
    print()

    async with AsyncSessionLocal() as session:
        report = await validate_workspace_migration(MigrationStorage(session), workspace_id)

        for check in report["checks"]:
            status = "OK" if check["passed"] else "FAILED"
            print(f"   [{status}] {check['name']}: {check['detail']}")

        result = await session.execute(
            select(Production).where(Production.workspace_id == workspace_id).limit(1)
        )
        production = result.scalar_one_or_none()
        if production:
            print("\n   Sample Production:")
            print(f"   - Name: {production.name}")
            print(f"   - Color: {production.color}")

            result = await session.execute(
                select(ShowTemplate).where(ShowTemplate.production_id == production.id)
            )
            for template in result.scalars().all():
                print(f"   - Template: {template.name} ({template.recurring_pattern}, {template.duration} min)")

    print()
    if report["passed"]:
        print("All checks passed")
    else:
        print("Some checks failed - review the output above")
    return report["passed"]


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    async def _run():
        try:
            return await validate_migration(sys.argv[1])
        finally:
            await engine.dispose()

    sys.exit(0 if asyncio.run(_run()) else 1)
