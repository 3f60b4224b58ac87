"""
Bonus tier tables.

Each metric carries an ordered list of (threshold, payout) tiers and a
direction flag. Tiers are read top to bottom and the first one satisfied
pays, so a table must run from the most demanding threshold to the least
demanding one. That ordering is checked when the rules are built; the last
tier of every table is the baseline target used by the reports.

The rules object is immutable and passed explicitly to the calculator and
the report aggregator.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from bono.core.config import settings
from bono.core.exceptions import RuleConfigError

logger = logging.getLogger(__name__)

# Fixed, explicit metric set. Nothing outside this tuple is ever scored.
METRIC_KEYS: Tuple[str, ...] = ("sales", "quality", "absenteeism")


class Tier(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: float
    payout: float


class MetricTierConfig(BaseModel):
    """Tier table for one metric. ascending=True means lower values are better."""
    model_config = ConfigDict(frozen=True)

    tiers: Tuple[Tier, ...]
    ascending: bool = False

    @model_validator(mode="after")
    def check_tier_order(self) -> "MetricTierConfig":
        if not self.tiers:
            raise ValueError("tier list must not be empty")
        thresholds = [t.threshold for t in self.tiers]
        for prev, nxt in zip(thresholds, thresholds[1:]):
            if self.ascending and not nxt > prev:
                raise ValueError(
                    f"lower-is-better tiers must have strictly increasing thresholds, got {thresholds}"
                )
            if not self.ascending and not nxt < prev:
                raise ValueError(
                    f"higher-is-better tiers must have strictly decreasing thresholds, got {thresholds}"
                )
        return self

    @property
    def baseline(self) -> float:
        """Least demanding threshold: the last tier."""
        return self.tiers[-1].threshold


class BonusRules(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    sales: MetricTierConfig
    quality: MetricTierConfig
    absenteeism: MetricTierConfig

    def for_metric(self, key: str) -> MetricTierConfig:
        if key not in METRIC_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def targets(self) -> Dict[str, float]:
        return {key: self.for_metric(key).baseline for key in METRIC_KEYS}


def _tiers(*pairs) -> Tuple[Tier, ...]:
    return tuple(Tier(threshold=t, payout=p) for t, p in pairs)


DEFAULT_BONUS_RULES = BonusRules(
    sales=MetricTierConfig(
        tiers=_tiers((150, 213525), (130, 170820), (115, 128115), (100, 85410)),
        ascending=False,
    ),
    quality=MetricTierConfig(
        tiers=_tiers((96, 128115), (93, 85410), (90, 42705)),
        ascending=False,
    ),
    absenteeism=MetricTierConfig(
        tiers=_tiers((1, 85410), (2, 68328), (3, 51246), (4, 27331.2)),
        ascending=True,
    ),
)


def parse_bonus_rules(data: dict) -> BonusRules:
    """
    Build rules from a plain mapping, e.g.:

        {"sales": {"ascending": false, "tiers": [{"threshold": 150, "payout": 213525}, ...]}, ...}
    """
    try:
        return BonusRules.model_validate(data)
    except PydanticValidationError as e:
        raise RuleConfigError(
            "Invalid bonus tier configuration",
            details={"errors": [
                {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                for err in e.errors()
            ]},
        ) from e


def load_bonus_rules(path: Optional[str] = None) -> BonusRules:
    """Load tier tables from a JSON file, or the built-in defaults when no path is given."""
    if not path:
        return DEFAULT_BONUS_RULES

    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RuleConfigError(f"Bonus rules file not found: {file_path}") from e
    except json.JSONDecodeError as e:
        raise RuleConfigError(f"Bonus rules file is not valid JSON: {e}") from e

    rules = parse_bonus_rules(raw)
    logger.info(f"Loaded bonus rules from {file_path}")
    return rules


@lru_cache(maxsize=1)
def get_bonus_rules() -> BonusRules:
    """Active rules for the running application."""
    return load_bonus_rules(settings.bonus_rules_file)
