"""
Three-tier scheduling models: Production -> ShowTemplate -> Event
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from crewer.database import Base
from crewer.utils.helpers import new_uuid


class Production(Base):
    __tablename__ = "productions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=False, default="#3b82f6")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    templates = relationship("ShowTemplate", back_populates="production", passive_deletes=True)
    events = relationship("Event", back_populates="production", passive_deletes=True)


class ShowTemplate(Base):
    __tablename__ = "show_templates"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    production_id = Column(String(36), ForeignKey("productions.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    recurring_pattern = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    production = relationship("Production", back_populates="templates")
    events = relationship("Event", back_populates="template")
    required_jobs = relationship("TemplateRequiredJob", passive_deletes=True)
    resources = relationship("TemplateResource", passive_deletes=True)


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_uuid)
    workspace_id = Column(String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    production_id = Column(String(36), ForeignKey("productions.id", ondelete="CASCADE"), nullable=False, index=True)
    template_id = Column(String(36), ForeignKey("show_templates.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="draft")
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    production = relationship("Production", back_populates="events")
    template = relationship("ShowTemplate", back_populates="events")
    crew_assignments = relationship("EventCrewAssignment", passive_deletes=True)
    resource_assignments = relationship("EventResourceAssignment", passive_deletes=True)
