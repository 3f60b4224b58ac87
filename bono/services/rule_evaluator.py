from typing import Sequence

from bono.core.bonus_rules import Tier


def evaluate(value: float, tiers: Sequence[Tier], ascending: bool) -> float:
    """
    Payout of the first tier the value satisfies, or 0.

    ascending=True (lower is better): satisfied when value <= threshold.
    ascending=False (higher is better): satisfied when value >= threshold.
    """
    for tier in tiers:
        if ascending:
            if value <= tier.threshold:
                return tier.payout
        elif value >= tier.threshold:
            return tier.payout
    return 0
