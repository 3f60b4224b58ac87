from abc import ABC, abstractmethod
from typing import List, Optional

from bono.schemas.bonus import BonusRecord, MetricValues, RecordKey

# Column order of the tabular boundary (sheet store and CSV export)
COLUMNS = ["id", "name", "email", "sales", "quality", "absenteeism", "totalBono", "timestamp"]


class RecordStore(ABC):
    """
    Persistence contract for bonus records.

    Lookups are by RecordKey. update() and delete() raise NotFoundError for
    unknown keys; find_by_key() returns None instead.
    """

    @abstractmethod
    def insert(self, record: BonusRecord) -> BonusRecord:
        ...

    @abstractmethod
    def list_all(self) -> List[BonusRecord]:
        """All records in insertion order."""

    @abstractmethod
    def find_by_key(self, key: RecordKey) -> Optional[BonusRecord]:
        ...

    @abstractmethod
    def update(self, key: RecordKey, metrics: MetricValues, total_bono: float) -> BonusRecord:
        """Overwrite the metric fields and total. Identity fields are never touched."""

    @abstractmethod
    def delete(self, key: RecordKey) -> None:
        ...


def record_to_row(record: BonusRecord) -> list:
    return [
        record.agent_id,
        record.name,
        record.email,
        record.sales,
        record.quality,
        record.absenteeism,
        record.total_bono,
        record.timestamp,
    ]
