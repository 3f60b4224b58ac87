"""
Reports Router

Individual performance reports. Kept off the /bonos prefix so that an
agent id can never be mistaken for a report path segment.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from bono.core.bonus_rules import BonusRules
from bono.core.schemas import ApiResponse
from bono.dependencies import get_rules, get_store
from bono.schemas.bonus import ReportResult
from bono.services import bonus_service
from bono.stores.base import RecordStore

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


@router.get("/{agent_id}", response_model=ApiResponse[ReportResult])
def get_individual_report(
    agent_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    store: RecordStore = Depends(get_store),
    rules: BonusRules = Depends(get_rules)
):
    """
    Period averages for one agent against the baseline targets.
    Both dates are inclusive calendar days.
    """
    report = bonus_service.get_individual_report(store, rules, agent_id, start_date, end_date)
    return ApiResponse.ok(report)
