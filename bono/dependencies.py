"""
FastAPI dependencies that wire the store, rules and calculator per request.
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from bono.core.bonus_rules import BonusRules, get_bonus_rules
from bono.core.config import settings
from bono.database import get_db
from bono.services.bonus_calculator import BonusCalculator
from bono.stores.base import RecordStore
from bono.stores.sheet_store import SheetRecordStore
from bono.stores.sql_store import SqlRecordStore


@lru_cache(maxsize=1)
def _sheet_store() -> SheetRecordStore:
    return SheetRecordStore(settings.sheet_path)


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    if settings.record_store == "sheet":
        return _sheet_store()
    return SqlRecordStore(db)


def get_rules() -> BonusRules:
    return get_bonus_rules()


def get_calculator(rules: BonusRules = Depends(get_rules)) -> BonusCalculator:
    return BonusCalculator(rules)


__all__ = [
    "get_store",
    "get_rules",
    "get_calculator",
]
