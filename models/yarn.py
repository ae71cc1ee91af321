"""
Yarn model for the stash catalog.
"""

from sqlalchemy import JSON, Column, Date, Float, Index, String, Text

from .base import BaseModel


class Yarn(BaseModel):
    """
    Represents a yarn in the stash. Projects reference yarns by id from
    their ``yarns_used`` items; deleting a yarn does not touch those items.
    """

    __tablename__ = "yarns"

    name = Column(String(200), nullable=False)
    brand = Column(String(200))
    weight = Column(String(50))  # Worsted, DK, Fingering...
    fiber_content = Column(String(200))
    color = Column(String(100))
    lot_number = Column(String(100))
    length_meters = Column(Float)
    weight_grams = Column(Float)
    price_per_unit = Column(Float)
    currency = Column(String(3), nullable=False, default="EUR")
    purchase_date = Column(Date)
    purchase_location = Column(String(200))
    quantity_in_stash = Column(Float, nullable=False, default=1)
    notes = Column(Text)
    photos = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_yarns_brand_name", "brand", "name"),
        Index("idx_yarns_weight", "weight"),
    )
