import json
import pytest
from pydantic import ValidationError as PydanticValidationError

from bono.core.bonus_rules import (
    DEFAULT_BONUS_RULES,
    Tier,
    load_bonus_rules,
    parse_bonus_rules,
)
from bono.core.exceptions import RuleConfigError


def _table(ascending, *pairs):
    return {"ascending": ascending, "tiers": [{"threshold": t, "payout": p} for t, p in pairs]}


def _rules_dict(**overrides):
    data = {
        "sales": _table(False, (10, 3), (5, 1)),
        "quality": _table(False, (90, 2)),
        "absenteeism": _table(True, (1, 2), (3, 1)),
    }
    data.update(overrides)
    return data


def test_default_targets_are_last_tiers():
    assert DEFAULT_BONUS_RULES.targets() == {"sales": 100, "quality": 90, "absenteeism": 4}


def test_parse_valid_rules():
    rules = parse_bonus_rules(_rules_dict())
    assert rules.sales.tiers[0] == Tier(threshold=10, payout=3)
    assert rules.absenteeism.ascending is True
    assert rules.targets() == {"sales": 5, "quality": 90, "absenteeism": 3}


def test_higher_is_better_tiers_must_decrease():
    with pytest.raises(RuleConfigError) as exc_info:
        parse_bonus_rules(_rules_dict(sales=_table(False, (5, 1), (10, 3))))
    assert exc_info.value.error_code == "RULE_CONFIG_ERROR"
    assert exc_info.value.details["errors"][0]["loc"].startswith("sales")


def test_lower_is_better_tiers_must_increase():
    with pytest.raises(RuleConfigError):
        parse_bonus_rules(_rules_dict(absenteeism=_table(True, (3, 1), (1, 2))))


def test_duplicate_thresholds_rejected():
    with pytest.raises(RuleConfigError):
        parse_bonus_rules(_rules_dict(quality=_table(False, (90, 2), (90, 1))))


def test_empty_tier_list_rejected():
    with pytest.raises(RuleConfigError):
        parse_bonus_rules(_rules_dict(quality=_table(False)))


def test_unknown_metric_rejected():
    with pytest.raises(RuleConfigError):
        parse_bonus_rules(_rules_dict(bonus=_table(False, (1, 1))))


def test_rules_are_immutable():
    with pytest.raises(PydanticValidationError):
        DEFAULT_BONUS_RULES.sales = DEFAULT_BONUS_RULES.quality


def test_load_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(_rules_dict()), encoding="utf-8")
    rules = load_bonus_rules(str(path))
    assert rules.quality.baseline == 90


def test_load_without_path_returns_defaults():
    assert load_bonus_rules(None) is DEFAULT_BONUS_RULES


def test_load_missing_file(tmp_path):
    with pytest.raises(RuleConfigError, match="not found"):
        load_bonus_rules(str(tmp_path / "missing.json"))


def test_load_invalid_json(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RuleConfigError, match="not valid JSON"):
        load_bonus_rules(str(path))
