"""
Bonos Router

HTTP endpoints for bonus records, KPIs, scoring and export.
All business logic is delegated to the bonus service layer.
"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status

from bono.core.bonus_rules import BonusRules
from bono.core.limiter import WRITE_LIMIT, limiter
from bono.core.schemas import ApiResponse
from bono.dependencies import get_calculator, get_rules, get_store
from bono.schemas.bonus import (
    BonusForm,
    BonusPreview,
    BonusRecord,
    BonusUpdate,
    KpiSummary,
    MetricValues,
    RecordKey,
)
from bono.services import bonus_service
from bono.services.bonus_calculator import BonusCalculator
from bono.services.presentation import XLSX_MEDIA_TYPE, export_workbook
from bono.stores.base import RecordStore

router = APIRouter(
    prefix="/bonos",
    tags=["bonos"],
)


@router.post("", response_model=ApiResponse[BonusRecord], status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
def create_record(
    request: Request,
    form: Optional[BonusForm] = Body(None),
    store: RecordStore = Depends(get_store),
    calculator: BonusCalculator = Depends(get_calculator)
):
    """
    Store a new record. The total is computed from the metrics;
    a client-supplied total is rejected as an unknown field.
    """
    return ApiResponse.ok(bonus_service.save(store, calculator, form))


@router.get("", response_model=ApiResponse[List[BonusRecord]])
def list_records(store: RecordStore = Depends(get_store)):
    records = bonus_service.list_all(store)
    return ApiResponse.ok(records, metadata={"count": len(records)})


@router.put("", response_model=ApiResponse[BonusRecord])
@limiter.limit(WRITE_LIMIT)
def update_record(
    request: Request,
    payload: Optional[BonusUpdate] = Body(None),
    store: RecordStore = Depends(get_store),
    calculator: BonusCalculator = Depends(get_calculator)
):
    """Replace the metrics of the record named by `record_key` and recompute its total."""
    return ApiResponse.ok(bonus_service.update(store, calculator, payload))


@router.get("/kpis", response_model=ApiResponse[KpiSummary])
def get_kpis(
    store: RecordStore = Depends(get_store),
    rules: BonusRules = Depends(get_rules)
):
    return ApiResponse.ok(bonus_service.get_kpis(store, rules))


@router.get("/rules", response_model=ApiResponse[BonusRules])
def get_active_rules(rules: BonusRules = Depends(get_rules)):
    """Tier tables currently used for scoring."""
    return ApiResponse.ok(rules, metadata={"targets": rules.targets()})


@router.post("/preview", response_model=ApiResponse[BonusPreview])
def preview_bonus(
    metrics: MetricValues,
    calculator: BonusCalculator = Depends(get_calculator)
):
    """Score metrics without storing a record."""
    return ApiResponse.ok(bonus_service.preview(calculator, metrics))


@router.get("/export.xlsx")
def export_records(store: RecordStore = Depends(get_store)):
    output = export_workbook(bonus_service.list_all(store))
    return Response(
        content=output.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=bonos.xlsx"}
    )


@router.get("/{agent_id}/{timestamp:path}", response_model=ApiResponse[BonusRecord])
def get_record(
    agent_id: str,
    timestamp: str,
    store: RecordStore = Depends(get_store)
):
    key = RecordKey(agent_id=agent_id, timestamp=timestamp)
    return ApiResponse.ok(bonus_service.get_by_id(store, key))


@router.delete("/{agent_id}/{timestamp:path}", response_model=ApiResponse[RecordKey])
@limiter.limit(WRITE_LIMIT)
def delete_record(
    request: Request,
    agent_id: str,
    timestamp: str,
    store: RecordStore = Depends(get_store)
):
    key = RecordKey(agent_id=agent_id, timestamp=timestamp)
    bonus_service.delete(store, key)
    return ApiResponse.ok(key)
