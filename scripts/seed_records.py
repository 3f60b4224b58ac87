"""
Seed a few demo bonus records into the configured SQL database.
Safe to re-run: records that already exist are skipped.
"""

from bono.core.bonus_rules import get_bonus_rules
from bono.core.exceptions import DuplicateRecordError
from bono.database import SessionLocal, init_db
from bono.schemas.bonus import BonusForm
from bono.services import bonus_service
from bono.services.bonus_calculator import BonusCalculator
from bono.stores.sql_store import SqlRecordStore


DEMO_RECORDS = [
    {"agent_id": "A-100", "name": "Laura Gómez", "email": "laura@example.com",
     "sales": 150, "quality": 96, "absenteeism": 1, "timestamp": "2024-03-01T09:00:00Z"},
    {"agent_id": "A-100", "name": "Laura Gómez", "email": "laura@example.com",
     "sales": 130, "quality": 94, "absenteeism": 2, "timestamp": "2024-03-15T09:00:00Z"},
    {"agent_id": "A-200", "name": "Carlos Ruiz", "email": "carlos@example.com",
     "sales": 120, "quality": 88, "absenteeism": 3, "timestamp": "2024-03-01T09:00:00Z"},
    {"agent_id": "A-300", "name": "Marta Díaz", "email": "marta@example.com",
     "sales": 99, "quality": 91, "absenteeism": 6, "timestamp": "2024-03-02T09:00:00Z"},
]


def seed_records():
    init_db()
    calculator = BonusCalculator(get_bonus_rules())
    db = SessionLocal()
    try:
        store = SqlRecordStore(db)
        for data in DEMO_RECORDS:
            try:
                record = bonus_service.save(store, calculator, BonusForm(**data))
                print(f"Created {record.agent_id} @ {record.timestamp}: {record.total_bono:,.2f}")
            except DuplicateRecordError:
                print(f"Skipped {data['agent_id']} @ {data['timestamp']} (exists)")
    finally:
        db.close()


if __name__ == "__main__":
    seed_records()
