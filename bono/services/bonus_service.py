"""
Bonus Service Layer

Entry points behind the HTTP routers and the dashboard.

Architecture:
- Router -> Service (this module) -> RecordStore / BonusCalculator / ReportAggregator
- Input is validated here before any store access
- Totals are always recomputed from the metrics; a caller-supplied total is never stored
"""
import logging
from datetime import date
from typing import List, Optional

from bono.core.bonus_rules import BonusRules
from bono.core.exceptions import NotFoundError, ValidationError
from bono.core.normalize import normalize_timestamp, utc_now
from bono.schemas.bonus import (
    BonusForm,
    BonusPreview,
    BonusRecord,
    BonusUpdate,
    KpiSummary,
    MetricValues,
    RecordKey,
    ReportResult,
)
from bono.services.bonus_calculator import BonusCalculator
from bono.services.report_service import ReportAggregator
from bono.stores.base import RecordStore

logger = logging.getLogger(__name__)


def _require_key(key: Optional[RecordKey]) -> RecordKey:
    if key is None or not key.agent_id or not key.timestamp:
        logger.warning("Rejected request without a complete record key")
        raise ValidationError("A record key (agent_id and timestamp) is required")
    return key


def save(
    store: RecordStore,
    calculator: BonusCalculator,
    form: Optional[BonusForm]
) -> BonusRecord:
    """
    Create a record from submitted form data.

    The timestamp defaults to the current UTC time and is normalized before
    it becomes part of the record key.
    """
    if form is None:
        logger.warning("Rejected save without form data")
        raise ValidationError("No form data received")

    metrics = MetricValues(sales=form.sales, quality=form.quality, absenteeism=form.absenteeism)
    timestamp = normalize_timestamp(form.timestamp if form.timestamp not in (None, "") else utc_now())

    record = BonusRecord(
        agent_id=form.agent_id,
        name=form.name,
        email=form.email,
        sales=metrics.sales,
        quality=metrics.quality,
        absenteeism=metrics.absenteeism,
        total_bono=calculator.calculate_total(metrics),
        timestamp=timestamp,
    )
    saved = store.insert(record)
    logger.info(f"Saved bonus record for agent {saved.agent_id} at {saved.timestamp}: total={saved.total_bono}")
    return saved


def update(
    store: RecordStore,
    calculator: BonusCalculator,
    payload: Optional[BonusUpdate]
) -> BonusRecord:
    """Replace the three metrics of an existing record and recompute its total."""
    if payload is None:
        logger.warning("Rejected update without form data")
        raise ValidationError("No form data received")
    key = _require_key(payload.record_key)

    metrics = MetricValues(sales=payload.sales, quality=payload.quality, absenteeism=payload.absenteeism)
    total = calculator.calculate_total(metrics)
    try:
        updated = store.update(key, metrics, total)
    except NotFoundError as e:
        raise NotFoundError(f"Cannot update bonus record: {e.message}") from e

    logger.info(f"Updated bonus record for agent {key.agent_id} at {key.timestamp}: total={total}")
    return updated


def delete(store: RecordStore, key: Optional[RecordKey]) -> None:
    key = _require_key(key)
    try:
        store.delete(key)
    except NotFoundError as e:
        raise NotFoundError(f"Cannot delete bonus record: {e.message}") from e
    logger.info(f"Deleted bonus record for agent {key.agent_id} at {key.timestamp}")


def get_by_id(store: RecordStore, key: Optional[RecordKey]) -> BonusRecord:
    key = _require_key(key)
    record = store.find_by_key(key)
    if record is None:
        raise NotFoundError(f"No record for agent '{key.agent_id}' at {key.timestamp}")
    return record


def list_all(store: RecordStore) -> List[BonusRecord]:
    return store.list_all()


def get_kpis(store: RecordStore, rules: BonusRules) -> KpiSummary:
    return ReportAggregator(store, rules).compute_kpis()


def get_individual_report(
    store: RecordStore,
    rules: BonusRules,
    agent_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> ReportResult:
    if not agent_id or not agent_id.strip():
        raise ValidationError("agent_id is required")
    return ReportAggregator(store, rules).build_report(agent_id.strip(), start_date, end_date)


def preview(calculator: BonusCalculator, metrics: MetricValues) -> BonusPreview:
    """Score metrics without storing anything."""
    breakdown = calculator.breakdown(metrics)
    return BonusPreview(metrics=metrics, breakdown=breakdown, total_bono=sum(breakdown.values()))
