# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import bonus_record

# Explicit class exports for cleaner imports
from .bonus_record import BonusRecordRow

__all__ = [
    "BonusRecordRow",
]
