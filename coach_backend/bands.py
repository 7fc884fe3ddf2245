"""Score bands shared by prompt building and fallback generation.

Raw aspect scores use the -3..+3 scale (higher is healthier). Quotients use
0..100 (higher is more problematic).
"""
import math
from typing import Dict, Iterable, Optional, Tuple

SEVERITY_TOKENS = ("significant", "critical", "severe", "serious")

HEALTHY_MAX = 25
PROBLEMATIC_MIN = 65
BALANCE_GAP = 15
MAX_REASONABLE_RETURN = 0.25


def average(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [float(v) for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def interpret_raw_score(score: float) -> str:
    if score <= -2:
        return "highly problematic"
    if score <= -1:
        return "somewhat problematic"
    if score >= 2:
        return "very healthy"
    if score >= 1:
        return "generally healthy"
    return "neutral"


def interpret_normalized_score(score: float) -> str:
    if score >= 80:
        return "critical pattern"
    if score >= 60:
        return "significant pattern"
    if score >= 40:
        return "moderate pattern"
    if score >= 20:
        return "mild pattern"
    return "healthy pattern"


def leaf_pattern_label(avg: float) -> str:
    """Tone label for the leaf prompt."""
    if avg >= 1.5:
        return "HEALTHY PATTERN"
    if avg <= -1.5:
        return "PROBLEMATIC PATTERN"
    return "MIXED PATTERN"


def leaf_band(avg: Optional[float]) -> str:
    """Fallback band for a leaf: critical, moderate or healthy."""
    if avg is None:
        return "moderate"
    if avg <= -2:
        return "critical"
    if avg <= 0:
        return "moderate"
    return "healthy"


def quotient_band(quotient: Optional[float]) -> str:
    """Band for a group or overall quotient: healthy, mixed or problematic."""
    if quotient is None:
        return "mixed"
    if quotient < HEALTHY_MAX:
        return "healthy"
    if quotient >= PROBLEMATIC_MIN:
        return "problematic"
    return "mixed"


def quotient_band_label(quotient: Optional[float]) -> str:
    return {
        "healthy": "HEALTHY (0-24)",
        "mixed": "MIXED (25-64)",
        "problematic": "PROBLEMATIC (65+)",
    }[quotient_band(quotient)]


def domain_balance(names: Dict[str, str], quotients: Dict[str, float]) -> str:
    """One sentence on how two group quotients relate.

    `names` maps group key to display name, in configuration order. Only the
    first two groups with a quotient are compared.
    """
    present = [(k, quotients[k]) for k in names if quotients.get(k) is not None]
    if len(present) < 2:
        return "Not enough group scores to compare domains."
    (k1, d1), (k2, d2) = present[:2]
    if abs(d1 - d2) < BALANCE_GAP:
        return "Both domains are relatively balanced."
    (hi_key, hi), (lo_key, lo) = ((k1, d1), (k2, d2)) if d1 > d2 else ((k2, d2), (k1, d1))
    sentence = (
        f"{names[hi_key]} is significantly more problematic "
        f"({round(hi - lo)} points higher). Focus heavily on this domain."
    )
    if lo < HEALTHY_MAX:
        sentence += (
            f" {names[lo_key]} is healthy (score {round(lo)}) and should be "
            "treated as a strength, not a problem."
        )
    return sentence


# (upper bound exclusive, label, explanation) on the 0..10 risk dial
RISK_BANDS = (
    (2.0, "Very Low Risk/Low Returns", "Cash, T-bills and investment-grade credit; low volatility and high liquidity."),
    (4.0, "Steady Returns", "Fixed funds; modest volatility with predictable income."),
    (6.0, "Growth Backed by Hard Assets", "Multi-family real estate; growth anchored by tangible assets."),
    (8.0, "High Growth", "Hedge fund strategies; higher return potential with larger swings."),
    (10.1, "High Risk/High Reward", "Private equity; the highest return potential with long lockups and deep drawdowns."),
)


def risk_band(risk: float) -> Tuple[str, str]:
    """(label, explanation) for a risk dial value."""
    for upper, label, explain in RISK_BANDS:
        if risk < upper:
            return label, explain
    return RISK_BANDS[-1][1], RISK_BANDS[-1][2]


def is_feasible(scenario) -> bool:
    if scenario.mode == "contrib" and scenario.required_savings is not None:
        return scenario.savings_capacity >= scenario.required_savings
    if scenario.mode == "return" and scenario.required_return is not None:
        return scenario.required_return <= MAX_REASONABLE_RETURN
    if scenario.mode == "time" and scenario.years_needed is not None:
        return math.isfinite(scenario.years_needed)
    return False


def future_value(scenario) -> float:
    """Projected balance after `years` of monthly contributions at the effective return."""
    months = scenario.years * 12
    if months <= 0:
        return round(scenario.current_assets)
    rate = scenario.effective_return / 12
    if rate > 0:
        growth = (1 + rate) ** months
        return round(scenario.current_assets * growth + scenario.savings_capacity * (growth - 1) / rate)
    return round(scenario.current_assets + scenario.savings_capacity * months)
