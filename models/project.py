"""
Project model: the root aggregate of the tracker.

A project owns its photos, usage items (yarns, needles, hooks) and additional
costs. Those sub-collections are stored inline as JSON lists on the project
row; they have no lifecycle outside their parent and are never queried on
their own.
"""

from sqlalchemy import JSON, Column, Date, Index, Integer, String, Text

from .base import BaseModel


class Project(BaseModel):
    """
    Represents a knitting or crochet project.

    ``version_id`` is the optimistic-concurrency token: SQLAlchemy adds it to
    the WHERE clause of every UPDATE and bumps it, so a write based on a stale
    read fails with ``StaleDataError`` instead of silently overwriting.
    """

    __tablename__ = "projects"

    name = Column(String(200), nullable=False)
    project_type = Column(String(20), nullable=False)  # knitting, crochet
    status = Column(String(20), nullable=False, default="active")
    comments = Column(Text)
    start_date = Column(Date)
    completion_date = Column(Date)

    photos = Column(JSON, nullable=False, default=list)
    yarns_used = Column(JSON, nullable=False, default=list)
    needles_used = Column(JSON, nullable=False, default=list)
    hooks_used = Column(JSON, nullable=False, default=list)
    additional_costs = Column(JSON, nullable=False, default=list)

    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        Index("idx_projects_status", "status"),
        Index("idx_projects_project_type", "project_type"),
        Index("idx_projects_updated_at", "updated_at"),
    )
