import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bono.core.exceptions import DuplicateRecordError, NotFoundError
from bono.models.bonus_record import BonusRecordRow
from bono.schemas.bonus import BonusRecord, MetricValues, RecordKey
from bono.stores.base import RecordStore

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """RecordStore over the bonus_records table. One instance per DB session."""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, key: RecordKey) -> Optional[BonusRecordRow]:
        return self.db.query(BonusRecordRow).filter(
            BonusRecordRow.agent_id == key.agent_id,
            BonusRecordRow.timestamp == key.timestamp
        ).first()

    def insert(self, record: BonusRecord) -> BonusRecord:
        row = BonusRecordRow(
            agent_id=record.agent_id,
            name=record.name,
            email=record.email,
            sales=record.sales,
            quality=record.quality,
            absenteeism=record.absenteeism,
            total_bono=record.total_bono,
            timestamp=record.timestamp,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate key on insert: agent={record.agent_id} timestamp={record.timestamp}")
            raise DuplicateRecordError(
                f"Record already exists for agent '{record.agent_id}' at {record.timestamp}"
            ) from e
        self.db.refresh(row)
        return BonusRecord.model_validate(row)

    def list_all(self) -> List[BonusRecord]:
        rows = self.db.query(BonusRecordRow).order_by(BonusRecordRow.row_id).all()
        return [BonusRecord.model_validate(row) for row in rows]

    def find_by_key(self, key: RecordKey) -> Optional[BonusRecord]:
        row = self._get_row(key)
        return BonusRecord.model_validate(row) if row else None

    def update(self, key: RecordKey, metrics: MetricValues, total_bono: float) -> BonusRecord:
        row = self._get_row(key)
        if not row:
            raise NotFoundError(f"No record for agent '{key.agent_id}' at {key.timestamp}")

        row.sales = metrics.sales
        row.quality = metrics.quality
        row.absenteeism = metrics.absenteeism
        row.total_bono = total_bono
        self.db.commit()
        self.db.refresh(row)
        return BonusRecord.model_validate(row)

    def delete(self, key: RecordKey) -> None:
        row = self._get_row(key)
        if not row:
            raise NotFoundError(f"No record for agent '{key.agent_id}' at {key.timestamp}")
        self.db.delete(row)
        self.db.commit()
