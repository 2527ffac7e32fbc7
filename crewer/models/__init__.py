from crewer.models.workspace import Workspace, Job, Resource, CrewMember
from crewer.models.legacy import LegacyShow, LegacyRequiredJob, LegacyShowResource, LegacyCrewAssignment
from crewer.models.production import Production, ShowTemplate, Event
from crewer.models.assignment import (
    TemplateRequiredJob,
    TemplateResource,
    EventCrewAssignment,
    EventResourceAssignment,
)
from crewer.models.migration import WorkspaceMigration

__all__ = [
    "Workspace",
    "Job",
    "Resource",
    "CrewMember",
    "LegacyShow",
    "LegacyRequiredJob",
    "LegacyShowResource",
    "LegacyCrewAssignment",
    "Production",
    "ShowTemplate",
    "Event",
    "TemplateRequiredJob",
    "TemplateResource",
    "EventCrewAssignment",
    "EventResourceAssignment",
    "WorkspaceMigration",
]
