from typing import Any, Dict, Mapping, Union

from bono.core.bonus_rules import BonusRules, METRIC_KEYS
from bono.core.normalize import normalize_metric
from bono.schemas.bonus import MetricValues
from bono.services.rule_evaluator import evaluate

MetricsInput = Union[MetricValues, Mapping[str, Any]]


class BonusCalculator:
    """Scores the fixed metric set against a set of tier tables."""

    def __init__(self, rules: BonusRules):
        self.rules = rules

    @staticmethod
    def normalize(metrics: MetricsInput) -> MetricValues:
        if isinstance(metrics, MetricValues):
            return metrics
        # Only the known metric keys are read; anything else in the mapping is ignored
        return MetricValues(**{key: normalize_metric(metrics.get(key)) for key in METRIC_KEYS})

    def breakdown(self, metrics: MetricsInput) -> Dict[str, float]:
        values = self.normalize(metrics)
        result = {}
        for key in METRIC_KEYS:
            config = self.rules.for_metric(key)
            result[key] = evaluate(getattr(values, key), config.tiers, config.ascending)
        return result

    def calculate_total(self, metrics: MetricsInput) -> float:
        return sum(self.breakdown(metrics).values())
