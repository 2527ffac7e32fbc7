"""
Legacy migration API endpoints - admin trigger, status and validation
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from crewer.config import Settings, get_settings
from crewer.database import get_db
from crewer.models import Event, LegacyShow, Production, ShowTemplate, Workspace, WorkspaceMigration
from crewer.services.migration import ArchitectureMigration, WorkspaceAlreadyMigratedError
from crewer.services.migration_validation import validate_workspace_migration
from crewer.services.storage import MigrationStorage
from crewer.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# --- Pydantic Schemas ---

class MigrationMarkerResponse(BaseModel):
    legacy_show_count: int
    production_count: int
    template_count: int
    event_count: int
    crew_assignment_count: int
    resource_assignment_count: int
    started_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True


class MigrationStatusResponse(BaseModel):
    workspace_id: str
    is_migrated: bool
    legacy_show_count: int
    marker: Optional[MigrationMarkerResponse] = None


class MigrationRunResponse(BaseModel):
    workspace_id: str
    migrated: bool
    stats: dict


class ValidationCheck(BaseModel):
    name: str
    passed: bool
    detail: str


class ValidationReport(BaseModel):
    workspace_id: str
    passed: bool
    checks: List[ValidationCheck]


class ProductionSummary(BaseModel):
    id: str
    name: str
    description: Optional[str]
    color: str
    template_count: int = 0
    event_count: int = 0


# --- Helpers ---

def get_migration_engine(db: AsyncSession = Depends(get_db)) -> ArchitectureMigration:
    return ArchitectureMigration(MigrationStorage(db))


async def _get_workspace_or_404(db: AsyncSession, workspace_id: str) -> Workspace:
    workspace = await db.get(Workspace, workspace_id)
    if not workspace:
        raise HTTPException(status_code=404, detail="Workspace not found")
    return workspace


# --- Endpoints ---

@router.get("/{workspace_id}/migration", response_model=MigrationStatusResponse)
async def get_migration_status(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    engine: ArchitectureMigration = Depends(get_migration_engine),
):
    """Whether the workspace has productions, plus the counters of its migration run"""
    await _get_workspace_or_404(db, workspace_id)

    legacy_count = await engine.storage.count_where(LegacyShow, LegacyShow.workspace_id == workspace_id)
    result = await db.execute(
        select(WorkspaceMigration).where(WorkspaceMigration.workspace_id == workspace_id)
    )
    marker = result.scalar_one_or_none()

    return MigrationStatusResponse(
        workspace_id=workspace_id,
        is_migrated=await engine.is_workspace_migrated(workspace_id),
        legacy_show_count=legacy_count,
        marker=MigrationMarkerResponse.model_validate(marker) if marker else None,
    )


@router.post("/{workspace_id}/migration", response_model=MigrationRunResponse)
async def run_migration(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    engine: ArchitectureMigration = Depends(get_migration_engine),
):
    """Migrate the workspace's legacy shows (admin action)"""
    await _get_workspace_or_404(db, workspace_id)

    try:
        await engine.migrate_workspace(workspace_id)
    except WorkspaceAlreadyMigratedError as e:
        await db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        await db.rollback()
        logger.error(f"Migration failed for workspace {workspace_id}: {e}")
        raise HTTPException(status_code=500, detail="Migration failed")

    await db.commit()
    return MigrationRunResponse(
        workspace_id=workspace_id,
        migrated=engine.stats['legacy_shows'] > 0,
        stats=engine.stats,
    )


@router.post("/{workspace_id}/migration/auto", response_model=MigrationRunResponse)
async def auto_migrate(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    engine: ArchitectureMigration = Depends(get_migration_engine),
):
    """Migrate only if the workspace has no productions yet"""
    await _get_workspace_or_404(db, workspace_id)

    try:
        ran = await engine.auto_migrate_if_needed(workspace_id)
    except WorkspaceAlreadyMigratedError as e:
        await db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        await db.rollback()
        logger.error(f"Auto-migration failed for workspace {workspace_id}: {e}")
        raise HTTPException(status_code=500, detail="Migration failed")

    await db.commit()
    return MigrationRunResponse(workspace_id=workspace_id, migrated=ran, stats=engine.stats)


@router.get("/{workspace_id}/migration/validation", response_model=ValidationReport)
async def get_migration_validation(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Integrity report comparing legacy rows with migrated rows"""
    await _get_workspace_or_404(db, workspace_id)
    return await validate_workspace_migration(MigrationStorage(db), workspace_id)


@router.get("/{workspace_id}/productions", response_model=List[ProductionSummary])
async def list_productions(
    workspace_id: str,
    db: AsyncSession = Depends(get_db),
    engine: ArchitectureMigration = Depends(get_migration_engine),
    settings: Settings = Depends(get_settings),
):
    """List productions, migrating legacy shows first on first access"""
    await _get_workspace_or_404(db, workspace_id)

    if settings.AUTO_MIGRATE_ON_ACCESS:
        try:
            if await engine.auto_migrate_if_needed(workspace_id):
                await db.commit()
        except WorkspaceAlreadyMigratedError:
            # Another request is migrating this workspace right now
            await db.rollback()
            logger.warning(f"Skipped lazy migration of workspace {workspace_id}: already claimed")

    result = await db.execute(
        select(Production)
        .where(Production.workspace_id == workspace_id)
        .order_by(Production.created_at, Production.name)
    )
    productions = result.scalars().all()

    template_counts = dict((await db.execute(
        select(ShowTemplate.production_id, func.count(ShowTemplate.id))
        .where(ShowTemplate.workspace_id == workspace_id)
        .group_by(ShowTemplate.production_id)
    )).all())
    event_counts = dict((await db.execute(
        select(Event.production_id, func.count(Event.id))
        .where(Event.workspace_id == workspace_id)
        .group_by(Event.production_id)
    )).all())

    return [
        ProductionSummary(
            id=p.id,
            name=p.name,
            description=p.description,
            color=p.color,
            template_count=template_counts.get(p.id, 0),
            event_count=event_counts.get(p.id, 0),
        )
        for p in productions
    ]
