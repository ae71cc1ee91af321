"""
Gauge model: a swatch measurement taken for a project.
"""

from sqlalchemy import JSON, Column, Float, ForeignKey, Index, String, Text

from .base import UUID, BaseModel


class Gauge(BaseModel):
    """
    Represents a gauge swatch. A gauge belongs to one project and may point at
    the yarn and the needle or hook it was worked with (never both tools).
    """

    __tablename__ = "gauges"

    # No FK to projects: deleting a project leaves these rows in place
    project_id = Column(UUID(), nullable=False)
    name = Column(String(200), nullable=False)
    gauge_type = Column(String(20), nullable=False)  # blocked, unblocked
    comments = Column(Text)

    yarn_id = Column(UUID(), ForeignKey("yarns.id", ondelete="SET NULL"))
    needle_id = Column(UUID(), ForeignKey("needles.id", ondelete="SET NULL"))
    hook_id = Column(UUID(), ForeignKey("hooks.id", ondelete="SET NULL"))

    stitches = Column(Float, nullable=False)
    rows = Column(Float, nullable=False)
    width_cm = Column(Float, nullable=False)
    height_cm = Column(Float, nullable=False)

    photos = Column(JSON, nullable=False, default=list)

    __table_args__ = (Index("idx_gauges_project_id", "project_id"),)

    @property
    def stitches_per_cm(self):
        return self.stitches / self.width_cm if self.width_cm else None

    @property
    def rows_per_cm(self):
        return self.rows / self.height_cm if self.height_cm else None

    @property
    def stitches_per_inch(self):
        per_cm = self.stitches_per_cm
        return per_cm * 2.54 if per_cm is not None else None

    @property
    def rows_per_inch(self):
        per_cm = self.rows_per_cm
        return per_cm * 2.54 if per_cm is not None else None
