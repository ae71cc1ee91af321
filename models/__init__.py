"""
Models package initialization.
"""

from .base import Base, BaseModel, utcnow
from .conversion import Conversion
from .gauge import Gauge
from .hook import Hook
from .needle import Needle
from .project import Project
from .yarn import Yarn

__all__ = [
    "Base",
    "BaseModel",
    "utcnow",
    "Project",
    "Yarn",
    "Needle",
    "Hook",
    "Gauge",
    "Conversion",
]
