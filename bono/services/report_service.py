"""
Report Service

Derived views over the stored bonus records: the individual performance
report and the dashboard KPIs. Nothing computed here is persisted.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from bono.core.bonus_rules import BonusRules, METRIC_KEYS
from bono.core.exceptions import NotFoundError, ValidationError
from bono.core.normalize import parse_timestamp
from bono.schemas.bonus import BonusRecord, KpiSummary, MetricReport, ReportResult
from bono.stores.base import RecordStore

logger = logging.getLogger(__name__)

DateBound = Union[date, datetime, None]


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class ReportAggregator:

    def __init__(self, store: RecordStore, rules: BonusRules):
        self.store = store
        self.rules = rules

    def select_records(
        self,
        agent_id: str,
        start_date: DateBound = None,
        end_date: DateBound = None
    ) -> List[BonusRecord]:
        """
        Records of one agent within [start_date, end_date + 1 day).

        Dates are read as UTC midnight, so the end date covers its whole
        calendar day. When a bound is given, records with an unparseable
        timestamp cannot be placed in the range and are left out.
        """
        start = parse_timestamp(start_date) if start_date is not None else None
        end = parse_timestamp(end_date) if end_date is not None else None
        if start and end and start > end:
            raise ValidationError(
                f"start_date {start_date} is after end_date {end_date}"
            )
        end_exclusive = end + timedelta(days=1) if end else None

        selected = []
        for record in self.store.list_all():
            if record.agent_id != agent_id:
                continue
            if start is None and end_exclusive is None:
                selected.append(record)
                continue
            stamp = parse_timestamp(record.timestamp)
            if stamp is None:
                continue
            if start is not None and stamp < start:
                continue
            if end_exclusive is not None and stamp >= end_exclusive:
                continue
            selected.append(record)
        return selected

    def build_report(
        self,
        agent_id: str,
        start_date: DateBound = None,
        end_date: DateBound = None
    ) -> ReportResult:
        records = self.select_records(agent_id, start_date, end_date)
        if not records:
            raise NotFoundError(f"No records found for agent '{agent_id}' in the selected period")

        metrics = []
        for key in METRIC_KEYS:
            config = self.rules.for_metric(key)
            average = _mean([getattr(r, key) for r in records])
            target = config.baseline
            passed = average <= target if config.ascending else average >= target
            metrics.append(MetricReport(
                metric=key,
                average=average,
                target=target,
                lower_is_better=config.ascending,
                passed=passed,
            ))

        bonus_earned = all(m.passed for m in metrics)
        # Stored per-record totals, gated by the period decision
        awarded_amount = sum(r.total_bono for r in records) if bonus_earned else 0.0

        latest = records[-1]
        logger.info(
            f"Report built for agent {agent_id}: {len(records)} records, "
            f"bonus_earned={bonus_earned}, awarded={awarded_amount}"
        )
        return ReportResult(
            agent_id=agent_id,
            name=latest.name,
            email=latest.email,
            start_date=start_date.date() if isinstance(start_date, datetime) else start_date,
            end_date=end_date.date() if isinstance(end_date, datetime) else end_date,
            record_count=len(records),
            average_total_bono=_mean([r.total_bono for r in records]),
            metrics=metrics,
            bonus_earned=bonus_earned,
            awarded_amount=awarded_amount,
            records=records,
        )

    def compute_kpis(self) -> KpiSummary:
        records = self.store.list_all()
        if not records:
            return KpiSummary()
        return KpiSummary(
            distinct_agents=len({r.agent_id for r in records}),
            avg_bonus=_mean([r.total_bono for r in records]),
            avg_quality=_mean([r.quality for r in records]),
        )
