"""
Migration marker - one row per workspace that went through the legacy migration
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from datetime import datetime
from crewer.database import Base
from crewer.utils.helpers import new_uuid


class WorkspaceMigration(Base):
    __tablename__ = "workspace_migrations"

    id = Column(String(36), primary_key=True, default=new_uuid)
    # Unique: a concurrent second migration fails on insert instead of duplicating rows
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), unique=True, nullable=False)
    legacy_show_count = Column(Integer, nullable=False, default=0)
    production_count = Column(Integer, nullable=False, default=0)
    template_count = Column(Integer, nullable=False, default=0)
    event_count = Column(Integer, nullable=False, default=0)
    crew_assignment_count = Column(Integer, nullable=False, default=0)
    resource_assignment_count = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
