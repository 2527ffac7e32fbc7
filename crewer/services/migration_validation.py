"""
Post-migration integrity checks for one workspace
"""
from sqlalchemy import and_, exists, select

from crewer.models import (
    Event,
    EventCrewAssignment,
    EventResourceAssignment,
    LegacyCrewAssignment,
    LegacyShow,
    LegacyShowResource,
    Production,
    ShowTemplate,
)
from crewer.services.storage import MigrationStorage


async def validate_workspace_migration(storage: MigrationStorage, workspace_id: str) -> dict:
    """Compare legacy and migrated rows of a workspace.

    Returns {"workspace_id", "passed", "checks": [{"name", "passed", "detail"}]}.
    """
    checks = []

    def check(name: str, passed: bool, detail: str):
        checks.append({"name": name, "passed": passed, "detail": detail})

    # Row counts
    legacy_shows = await storage.count_where(LegacyShow, LegacyShow.workspace_id == workspace_id)
    events = await storage.count_where(Event, Event.workspace_id == workspace_id)
    check("events_match_legacy_shows", events == legacy_shows,
          f"{events} events for {legacy_shows} legacy shows")

    legacy_crew = await storage.count_where(
        LegacyCrewAssignment, LegacyCrewAssignment.workspace_id == workspace_id
    )
    event_crew = await storage.count_where(
        EventCrewAssignment, EventCrewAssignment.workspace_id == workspace_id
    )
    check("crew_assignments_match", event_crew == legacy_crew,
          f"{event_crew} event crew assignments for {legacy_crew} legacy crew assignments")

    legacy_resources = await storage.count_where(
        LegacyShowResource, LegacyShowResource.workspace_id == workspace_id
    )
    event_resources = await storage.count_where(
        EventResourceAssignment, EventResourceAssignment.workspace_id == workspace_id
    )
    check("resource_assignments_match", event_resources == legacy_resources,
          f"{event_resources} event resource assignments for {legacy_resources} legacy show resources")

    # Orphans
    orphan_events = await storage.count_where(
        Event,
        Event.workspace_id == workspace_id,
        Event.production_id.not_in(select(Production.id)),
    )
    check("events_have_productions", orphan_events == 0,
          f"{orphan_events} events without a production")

    mismatched_templates = await storage.count_where(
        Event,
        Event.workspace_id == workspace_id,
        Event.template_id.is_not(None),
        ~exists().where(and_(
            ShowTemplate.id == Event.template_id,
            ShowTemplate.production_id == Event.production_id,
        )),
    )
    check("templates_belong_to_event_production", mismatched_templates == 0,
          f"{mismatched_templates} events referencing a template of another production")

    orphan_crew = await storage.count_where(
        EventCrewAssignment,
        EventCrewAssignment.workspace_id == workspace_id,
        EventCrewAssignment.event_id.not_in(select(Event.id)),
    )
    orphan_resources = await storage.count_where(
        EventResourceAssignment,
        EventResourceAssignment.workspace_id == workspace_id,
        EventResourceAssignment.event_id.not_in(select(Event.id)),
    )
    check("assignments_have_events", orphan_crew + orphan_resources == 0,
          f"{orphan_crew} crew and {orphan_resources} resource assignments without an event")

    # Workspace isolation
    foreign_productions = await storage.count_where(
        Event,
        Event.workspace_id == workspace_id,
        Event.production_id.in_(
            select(Production.id).where(Production.workspace_id != workspace_id)
        ),
    )
    foreign_template_productions = await storage.count_where(
        ShowTemplate,
        ShowTemplate.workspace_id == workspace_id,
        ShowTemplate.production_id.in_(
            select(Production.id).where(Production.workspace_id != workspace_id)
        ),
    )
    foreign_templates = await storage.count_where(
        Event,
        Event.workspace_id == workspace_id,
        Event.template_id.in_(
            select(ShowTemplate.id).where(ShowTemplate.workspace_id != workspace_id)
        ),
    )
    foreign_events = await storage.count_where(
        EventCrewAssignment,
        EventCrewAssignment.workspace_id == workspace_id,
        EventCrewAssignment.event_id.in_(
            select(Event.id).where(Event.workspace_id != workspace_id)
        ),
    )
    foreign_events += await storage.count_where(
        EventResourceAssignment,
        EventResourceAssignment.workspace_id == workspace_id,
        EventResourceAssignment.event_id.in_(
            select(Event.id).where(Event.workspace_id != workspace_id)
        ),
    )
    leaks = foreign_productions + foreign_template_productions + foreign_templates + foreign_events
    check("no_cross_workspace_references", leaks == 0,
          f"{foreign_productions + foreign_template_productions} events/templates under another workspace's "
          f"productions, {foreign_templates} events on another workspace's templates, "
          f"{foreign_events} assignments on another workspace's events")

    return {
        "workspace_id": workspace_id,
        "passed": all(c["passed"] for c in checks),
        "checks": checks,
    }
