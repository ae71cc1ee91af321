"""
Needle model for the tool catalog.
"""

from sqlalchemy import Column, Float, Index, String, Text

from .base import BaseModel


class Needle(BaseModel):
    """
    Represents a knitting needle (straight, circular or double-pointed).
    """

    __tablename__ = "needles"

    size_mm = Column(Float, nullable=False)
    size_us = Column(String(20))
    type = Column(String(20), nullable=False)  # straight, circular, dpn
    length_cm = Column(Float)
    material = Column(String(100))
    brand = Column(String(200))
    price = Column(Float)
    currency = Column(String(3), nullable=False, default="EUR")
    notes = Column(Text)

    __table_args__ = (Index("idx_needles_size_mm", "size_mm"),)
