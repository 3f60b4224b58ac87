from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from bono.core.bonus_rules import BonusRules
from bono.core.config import settings
from bono.dependencies import get_rules, get_store
from bono.services import bonus_service
from bono.services.presentation import render_dashboard_html, render_report_html
from bono.stores.base import RecordStore

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


@router.get("", response_class=HTMLResponse)
def dashboard(
    store: RecordStore = Depends(get_store),
    rules: BonusRules = Depends(get_rules)
):
    """KPIs, the record table and the entry form."""
    records = bonus_service.list_all(store)
    kpis = bonus_service.get_kpis(store, rules)
    return HTMLResponse(render_dashboard_html(records, kpis, api_prefix=settings.api_prefix))


@router.get("/report/{agent_id}", response_class=HTMLResponse)
def report_page(
    agent_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    store: RecordStore = Depends(get_store),
    rules: BonusRules = Depends(get_rules)
):
    report = bonus_service.get_individual_report(store, rules, agent_id, start_date, end_date)
    return HTMLResponse(render_report_html(report))
