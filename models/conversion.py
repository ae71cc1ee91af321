"""
Conversion model: a saved measurement conversion based on a gauge.
"""

from sqlalchemy import JSON, Column, ForeignKey, Index, String, Text

from .base import UUID, BaseModel


class Conversion(BaseModel):
    """
    Represents a conversion (e.g. 20 cm -> 44 stitches) worked out from a gauge.

    The conversion's values and units live in ``conversion_data``.
    """

    __tablename__ = "conversions"

    # No FK to projects: deleting a project leaves these rows in place
    project_id = Column(UUID(), nullable=False)
    gauge_id = Column(UUID(), ForeignKey("gauges.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    comments = Column(Text)
    conversion_data = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        Index("idx_conversions_project_id", "project_id"),
        Index("idx_conversions_gauge_id", "gauge_id"),
        Index("idx_conversions_project_gauge", "project_id", "gauge_id"),
    )
