# Import all models to ensure they are registered with SQLModel
from app.models import volunteer, event
from app.core import config, civil_time
from app.database import engine

__all__ = [
    "volunteer",
    "event",
    "config",
    "civil_time",
    "engine",
]
