"""
Legacy flat show models. Read-only input of the three-tier migration.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from datetime import datetime
from crewer.database import Base
from crewer.utils.helpers import new_uuid


class LegacyShow(Base):
    __tablename__ = "shows"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    recurring_pattern = Column(String, nullable=True)  # RRULE-like, e.g. "FREQ=WEEKLY;BYDAY=MO"
    color = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="draft")  # draft, scheduled, in_progress, completed, cancelled
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class LegacyRequiredJob(Base):
    __tablename__ = "required_jobs"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    show_id = Column(String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class LegacyShowResource(Base):
    __tablename__ = "show_resources"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    show_id = Column(String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True)
    resource_id = Column(String(36), ForeignKey("resources.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class LegacyCrewAssignment(Base):
    __tablename__ = "crew_assignments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    show_id = Column(String(36), ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True)
    crew_member_id = Column(String(36), ForeignKey("crew_members.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, confirmed, declined
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
