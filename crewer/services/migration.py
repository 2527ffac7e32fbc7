"""
Legacy shows -> three-tier migration engine.

Converts the flat `shows` table of a workspace into
Productions -> Show Templates -> Events:

- shows are grouped into productions by their title with episode numbers
  and dates stripped off
- inside a production, shows sharing a recurring pattern get one template
  (duration and requirements taken from the first show); shows without a
  pattern become direct events
- every legacy show becomes exactly one event and its crew/resource
  assignments are copied onto that event

The whole run happens inside one transaction and starts by inserting a
per-workspace marker row, so a second run fails instead of duplicating data.
"""
import re
from collections import defaultdict
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from crewer.config import get_settings
from crewer.models import (
    Event,
    EventCrewAssignment,
    EventResourceAssignment,
    LegacyCrewAssignment,
    LegacyRequiredJob,
    LegacyShow,
    LegacyShowResource,
    Production,
    ShowTemplate,
    TemplateRequiredJob,
    TemplateResource,
    WorkspaceMigration,
)
from crewer.services.storage import MigrationStorage
from crewer.utils.helpers import minutes_between
from crewer.utils.logger import get_logger, workspace_logger

logger = get_logger(__name__)

ONE_OFF = "one-off"

# Trailing title decorations that vary between episodes of one production
_TITLE_SUFFIXES = (
    re.compile(r"\s*-\s*(?:Episode|Ep\.)\s*\d+\s*$"),  # "- Episode 12", "- Ep. 3"
    re.compile(r"\s*-\s*\d{1,2}/\d{1,2}/\d{4}\s*$"),  # "- 3/1/2024"
    re.compile(r"\s*\(\d{4}-\d{2}-\d{2}\)\s*$"),  # "(2024-03-01)"
)


class MigrationError(Exception):
    """Base error for the legacy migration"""


class WorkspaceAlreadyMigratedError(MigrationError):
    def __init__(self, workspace_id: str):
        self.workspace_id = workspace_id
        super().__init__(f"Workspace {workspace_id} has already been migrated")


def extract_production_name(title: str) -> str:
    """Strip episode markers and dates from a show title.

    Suffixes are removed repeatedly so "Quiz Night - Ep. 4 (2024-03-01)"
    becomes "Quiz Night". A title made only of decorations is kept as is.
    """
    name = title.strip()
    previous = None
    while name != previous:
        previous = name
        for pattern in _TITLE_SUFFIXES:
            name = pattern.sub("", name).strip()
    return name or title.strip()


def group_shows_by_production(shows: list) -> dict[str, list]:
    """Group shows by exact stripped title, keeping first-seen order"""
    groups: dict[str, list] = {}
    for show in shows:
        groups.setdefault(extract_production_name(show.title), []).append(show)
    return groups


def recurrence_key(pattern: Optional[str]) -> str:
    if pattern is None or not pattern.strip():
        return ONE_OFF
    return pattern


def partition_by_pattern(shows: list) -> dict[str, list]:
    """Split a production group by literal recurring pattern"""
    partitions: dict[str, list] = {}
    for show in shows:
        partitions.setdefault(recurrence_key(show.recurring_pattern), []).append(show)
    return partitions


def _index_by_show(rows: list) -> dict[str, list]:
    index = defaultdict(list)
    for row in rows:
        index[row.show_id].append(row)
    return index


class ArchitectureMigration:
    """Migrates one workspace at a time through an injected storage"""

    def __init__(self, storage: MigrationStorage, default_color: Optional[str] = None):
        self.storage = storage
        self.default_color = default_color or get_settings().DEFAULT_PRODUCTION_COLOR
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict:
        return {
            'legacy_shows': 0,
            'productions': 0,
            'templates': 0,
            'events': 0,
            'template_required_jobs': 0,
            'template_resources': 0,
            'crew_assignments': 0,
            'resource_assignments': 0,
        }

    async def migrate_workspace(self, workspace_id: str) -> None:
        """Migrate every legacy show of the workspace in one transaction"""
        async with self.storage.transaction():
            await self._migrate(workspace_id)

    async def is_workspace_migrated(self, workspace_id: str) -> bool:
        """True once at least one production exists for the workspace"""
        count = await self.storage.count_where(
            Production, Production.workspace_id == workspace_id
        )
        return count > 0

    async def auto_migrate_if_needed(self, workspace_id: str) -> bool:
        """Migrate unless productions already exist. Returns True if rows were written."""
        async with self.storage.transaction():
            if await self.is_workspace_migrated(workspace_id):
                return False
            return await self._migrate(workspace_id)

    async def _migrate(self, workspace_id: str) -> bool:
        log = workspace_logger(logger, workspace_id)
        self.stats = self._empty_stats()
        log.info("Starting legacy show migration")

        legacy_shows = await self.storage.select_where(
            LegacyShow,
            LegacyShow.workspace_id == workspace_id,
            order_by=(LegacyShow.start_time, LegacyShow.created_at, LegacyShow.id),
        )
        if not legacy_shows:
            log.info("No legacy shows to migrate")
            return False

        self.stats['legacy_shows'] = len(legacy_shows)
        log.info(f"Found {len(legacy_shows)} legacy shows to migrate")

        marker = await self._claim_workspace(workspace_id, len(legacy_shows))
        children = await self._load_legacy_children(workspace_id)

        groups = group_shows_by_production(legacy_shows)
        log.info(f"Grouped into {len(groups)} productions")
        for production_name, shows in groups.items():
            await self._migrate_production_group(workspace_id, production_name, shows, children, log)

        marker.production_count = self.stats['productions']
        marker.template_count = self.stats['templates']
        marker.event_count = self.stats['events']
        marker.crew_assignment_count = self.stats['crew_assignments']
        marker.resource_assignment_count = self.stats['resource_assignments']
        marker.completed_at = datetime.utcnow()

        log.info(
            f"Migration complete: {self.stats['productions']} productions, "
            f"{self.stats['templates']} templates, {self.stats['events']} events, "
            f"{self.stats['crew_assignments']} crew / "
            f"{self.stats['resource_assignments']} resource assignments"
        )
        return True

    async def _claim_workspace(self, workspace_id: str, legacy_show_count: int) -> WorkspaceMigration:
        existing = await self.storage.select_where(
            WorkspaceMigration, WorkspaceMigration.workspace_id == workspace_id
        )
        if existing:
            raise WorkspaceAlreadyMigratedError(workspace_id)
        try:
            return await self.storage.insert_returning(WorkspaceMigration, {
                'workspace_id': workspace_id,
                'legacy_show_count': legacy_show_count,
            })
        except IntegrityError as e:
            # Lost the race against a concurrent migration of the same workspace
            raise WorkspaceAlreadyMigratedError(workspace_id) from e

    async def _load_legacy_children(self, workspace_id: str) -> dict[str, dict[str, list]]:
        """Fetch requirement and assignment rows once per table, indexed by show"""
        required_jobs = await self.storage.select_where(
            LegacyRequiredJob,
            LegacyRequiredJob.workspace_id == workspace_id,
            order_by=(LegacyRequiredJob.created_at, LegacyRequiredJob.id),
        )
        resources = await self.storage.select_where(
            LegacyShowResource,
            LegacyShowResource.workspace_id == workspace_id,
            order_by=(LegacyShowResource.created_at, LegacyShowResource.id),
        )
        crew = await self.storage.select_where(
            LegacyCrewAssignment,
            LegacyCrewAssignment.workspace_id == workspace_id,
            order_by=(LegacyCrewAssignment.created_at, LegacyCrewAssignment.id),
        )
        return {
            'required_jobs': _index_by_show(required_jobs),
            'resources': _index_by_show(resources),
            'crew': _index_by_show(crew),
        }

    async def _migrate_production_group(self, workspace_id, production_name, shows, children, log):
        first_show = shows[0]
        production = await self.storage.insert_returning(Production, {
            'workspace_id': workspace_id,
            'name': production_name,
            'description': first_show.description,
            'color': first_show.color or self.default_color,
        })
        self.stats['productions'] += 1
        log.info(f"Created production: {production_name} ({len(shows)} legacy shows)")

        for pattern, partition in partition_by_pattern(shows).items():
            template = None
            if pattern != ONE_OFF:
                template = await self._create_template(production, pattern, partition[0], children, log)
            for show in partition:
                await self._create_event(production, template, show, children, log)

    async def _create_template(self, production, pattern, first_show, children, log) -> ShowTemplate:
        duration = minutes_between(first_show.start_time, first_show.end_time)
        template = await self.storage.insert_returning(ShowTemplate, {
            'workspace_id': production.workspace_id,
            'production_id': production.id,
            'name': f"{production.name} Template",
            'description': first_show.description,
            'duration': duration,
            'recurring_pattern': pattern,
            'notes': first_show.notes,
            'color': first_show.color,
        })
        self.stats['templates'] += 1

        # Requirements come from the first show only, not from every occurrence
        jobs = await self.storage.insert_many(TemplateRequiredJob, [
            {
                'workspace_id': production.workspace_id,
                'template_id': template.id,
                'job_id': required.job_id,
                'quantity': required.quantity or 1,
                'notes': required.notes,
            }
            for required in children['required_jobs'].get(first_show.id, [])
        ])
        resources = await self.storage.insert_many(TemplateResource, [
            {
                'workspace_id': production.workspace_id,
                'template_id': template.id,
                'resource_id': show_resource.resource_id,
                'quantity': 1,
            }
            for show_resource in children['resources'].get(first_show.id, [])
        ])
        self.stats['template_required_jobs'] += len(jobs)
        self.stats['template_resources'] += len(resources)

        log.info(f"Created template: {template.name} ({pattern}, {duration} min)")
        return template

    async def _create_event(self, production, template, legacy_show, children, log) -> Event:
        event = await self.storage.insert_returning(Event, {
            'workspace_id': production.workspace_id,
            'production_id': production.id,
            'template_id': template.id if template else None,
            'title': legacy_show.title,
            'description': legacy_show.description,
            'start_time': legacy_show.start_time,
            'end_time': legacy_show.end_time,
            'notes': legacy_show.notes,
            'status': legacy_show.status,
            'color': legacy_show.color,
        })
        self.stats['events'] += 1

        crew = await self.storage.insert_many(EventCrewAssignment, [
            {
                'workspace_id': production.workspace_id,
                'event_id': event.id,
                'crew_member_id': assignment.crew_member_id,
                'job_id': assignment.job_id,
                'status': assignment.status,
            }
            for assignment in children['crew'].get(legacy_show.id, [])
        ])
        resources = await self.storage.insert_many(EventResourceAssignment, [
            {
                'workspace_id': production.workspace_id,
                'event_id': event.id,
                'resource_id': show_resource.resource_id,
            }
            for show_resource in children['resources'].get(legacy_show.id, [])
        ])
        self.stats['crew_assignments'] += len(crew)
        self.stats['resource_assignments'] += len(resources)

        log.debug(f"Created event: {event.title} ({len(crew)} crew, {len(resources)} resources)")
        return event
