"""
Hook model for the tool catalog.
"""

from sqlalchemy import Column, Float, Index, String, Text

from .base import BaseModel


class Hook(BaseModel):
    """
    Represents a crochet hook.
    """

    __tablename__ = "hooks"

    size_mm = Column(Float, nullable=False)
    size_us = Column(String(50))
    material = Column(String(100))
    brand = Column(String(200))
    price = Column(Float)
    currency = Column(String(3), nullable=False, default="EUR")
    notes = Column(Text)

    __table_args__ = (Index("idx_hooks_size_mm", "size_mm"),)
