"""Database models for the subway line service."""

# Import all models to register them with SQLAlchemy metadata
from subway.models.base import Base, BaseModel
from subway.models.line import Line, Section, Station

__all__ = [
    # Base
    "Base",
    "BaseModel",
    # Line models
    "Line",
    "Section",
    "Station",
]
