from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bono.core.normalize import normalize_metric, normalize_timestamp


class MetricValues(BaseModel):
    """The three scored metrics. Bad or missing values read as 0."""
    model_config = ConfigDict(extra="forbid")

    sales: float = 0.0
    quality: float = 0.0
    absenteeism: float = 0.0

    @field_validator("sales", "quality", "absenteeism", mode="before")
    @classmethod
    def coerce_metric(cls, value: Any) -> float:
        return normalize_metric(value)


class RecordKey(BaseModel):
    """Record identity: agent id plus normalized timestamp, compared field by field."""
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    agent_id: str
    timestamp: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize(cls, value: Any) -> str:
        return normalize_timestamp(value)


class BonusForm(MetricValues):
    """Submission from the entry form. The total is always computed server-side."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    agent_id: str = Field(min_length=1)
    name: str = ""
    email: str = ""
    timestamp: Optional[Union[datetime, str]] = None


class BonusUpdate(MetricValues):
    record_key: Optional[RecordKey] = None


class BonusRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="forbid")

    agent_id: str
    name: str = ""
    email: str = ""
    sales: float = 0.0
    quality: float = 0.0
    absenteeism: float = 0.0
    total_bono: float = 0.0
    timestamp: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize(cls, value: Any) -> str:
        return normalize_timestamp(value)

    @property
    def key(self) -> RecordKey:
        return RecordKey(agent_id=self.agent_id, timestamp=self.timestamp)


class BonusPreview(BaseModel):
    metrics: MetricValues
    breakdown: Dict[str, float]
    total_bono: float


class MetricReport(BaseModel):
    metric: str
    average: float
    target: float
    lower_is_better: bool
    passed: bool


class ReportResult(BaseModel):
    agent_id: str
    name: str = ""
    email: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    record_count: int
    average_total_bono: float
    metrics: List[MetricReport]
    bonus_earned: bool
    awarded_amount: float
    records: List[BonusRecord] = []

    def metric(self, key: str) -> MetricReport:
        for item in self.metrics:
            if item.metric == key:
                return item
        raise KeyError(key)


class KpiSummary(BaseModel):
    distinct_agents: int = 0
    avg_bonus: float = 0.0
    avg_quality: float = 0.0
