import logging
from typing import Dict, List, Optional, Tuple

from coach_backend import fallback_catalog as catalog
from coach_backend.bands import (
    average,
    domain_balance,
    future_value,
    is_feasible,
    leaf_band,
    quotient_band,
    risk_band,
)
from coach_backend.schemas import InsightKind, InsightRequest, InsightResult, Scenario, ScoreContext
from coach_backend.tools import get_tool

logger = logging.getLogger(__name__)

ASPECTS = ("belief", "behavior", "feeling", "consequence")


def _money(value: float) -> str:
    return f"${round(value):,}"


def _highest(scores: Dict[str, float], keys: List[str]) -> Optional[Tuple[str, float]]:
    """Highest-scoring key among `keys`, first in order on ties. Missing keys are skipped."""
    best = None
    for key in keys:
        value = scores.get(key)
        if value is None:
            continue
        if best is None or value > best[1]:
            best = (key, value)
    return best


class FallbackGenerator:
    """Deterministic, score-aware content for every insight kind."""

    def generate(self, score: ScoreContext, kind: InsightKind, context: InsightRequest) -> InsightResult:
        kind = InsightKind(kind)
        builder = {
            InsightKind.LEAF: self._leaf,
            InsightKind.GROUP_SYNTHESIS: self._group,
            InsightKind.OVERALL_SYNTHESIS: self._overall,
            InsightKind.COMPARISON_SYNTHESIS: self._comparison,
            InsightKind.SCENARIO_REPORT: self._scenario_report,
        }[kind]
        fields = builder(score, context)
        return InsightResult(kind=kind, fields=fields, source="fallback")

    # ---- assessment kinds ----

    def _leaf(self, score: ScoreContext, context: InsightRequest) -> Dict:
        band = leaf_band(average(score.item_scores.get(a) for a in ASPECTS))
        entry = catalog.LEAF_ENTRIES.get((context.tool_id, context.item_key or ""))
        if entry is None:
            logger.debug("no leaf entry for %s/%s, using generic", context.tool_id, context.item_key)
            entry = catalog.GENERIC_LEAF
        return dict(entry[band])

    def _group(self, score: ScoreContext, context: InsightRequest) -> Dict:
        tool = get_tool(context.tool_id)
        group = tool.group(context.group_key or "") if tool else None
        quotient = score.overall_quotient
        band = quotient_band(quotient)
        entry = catalog.GROUP_ENTRIES.get((context.tool_id, context.group_key or ""))
        name = group.name if group else (context.group_key or "This domain")

        summary = entry["summary"] if entry else f"Your {name} patterns show where this part of your financial life needs attention."
        summary += " " + catalog.GROUP_BAND_SENTENCES[band]
        if quotient is not None:
            summary += f" Your domain score is {round(quotient)} out of 100."

        keys = group.item_keys if group else list(score.group_quotients)
        top = _highest(score.group_quotients, keys)
        if top is None:
            focus = "Start with the pattern whose insight resonates most with you and practice its action step this week."
        else:
            label = tool.label_for(top[0]) if tool else top[0]
            if band == "healthy":
                focus = f'Deepen your grounding by keeping an eye on "{label}" (score {round(top[1])}), your highest-scoring pattern here.'
            else:
                focus = f'Start with "{label}" (score {round(top[1])}), the strongest pattern in this domain, where change will have the greatest impact.'

        return {
            "summary": summary,
            "key_themes": list(entry["key_themes"]) if entry else list(catalog.GENERIC_GROUP_THEMES),
            "priority_focus": focus,
        }

    def _overall(self, score: ScoreContext, context: InsightRequest) -> Dict:
        tool = get_tool(context.tool_id)
        band = quotient_band(score.overall_quotient)
        entry = catalog.OVERALL_ENTRIES.get(context.tool_id, catalog.GENERIC_OVERALL)

        overview = f"{entry['overview']} {catalog.OVERALL_BAND_SENTENCES[band]}"
        if tool:
            names = {g.key: g.name for g in tool.groups}
            overview += " " + domain_balance(names, score.group_quotients)

        steps = []
        group_keys = [g.key for g in tool.groups] if tool else list(score.group_quotients)
        top_group = _highest(score.group_quotients, group_keys)
        if top_group:
            group = tool.group(top_group[0]) if tool else None
            group_name = group.name if group else top_group[0]
            steps.append(f"Begin with {group_name} (score {round(top_group[1])}), your highest-scoring domain.")
            item_keys = group.item_keys if group else list(score.item_scores)
            top_item = _highest(score.item_scores, item_keys) or _highest(score.item_scores, list(score.item_scores))
        else:
            steps.append("Begin with the domain whose summary resonates most with you.")
            top_item = _highest(score.item_scores, [i.key for i in tool.items] if tool else list(score.item_scores))
        if top_item:
            label = tool.label_for(top_item[0]) if tool else top_item[0]
            steps.append(f'Within it, focus on "{label}" (score {round(top_item[1])}) and practice the action step given for it.')
        else:
            steps.append("Within it, focus on the pattern that scored highest and practice the action step given for it.")
        steps += [
            "Each day this week, notice one moment when the pattern shows up and write down what you did instead.",
            "Once a week, review your notes and choose one small experiment for the following week.",
            "After 30 days, compare how you handle money decisions now with how you handled them before.",
        ]

        return {
            "overview": overview,
            "integration": entry["integration"],
            "core_work": entry["core_work"],
            "next_steps": steps,
        }

    # ---- planning kinds ----

    def _comparison(self, score: ScoreContext, context: InsightRequest) -> Dict:
        a: Scenario = context.extra["scenario_a"]
        b: Scenario = context.extra["scenario_b"]
        name_a, name_b = a.name or "Scenario A", b.name or "Scenario B"
        fa, fb = is_feasible(a), is_feasible(b)

        synthesis = (
            f'Your two scenarios, "{name_a}" and "{name_b}", take different approaches to your retirement goals. '
            f'"{name_a}" targets {_money(a.monthly_income_goal)}/month in retirement income at a risk level of {a.risk:.1f}/10, '
            f'while "{name_b}" targets {_money(b.monthly_income_goal)}/month at risk level {b.risk:.1f}/10. '
            f"The required nest eggs differ by {_money(abs(a.required_nest_egg - b.required_nest_egg))}."
        )

        if fa and not fb:
            guidance = f'"{name_a}" is currently the more achievable path. Consider what adjustments would bring "{name_b}" within reach.'
        elif fb and not fa:
            guidance = f'"{name_b}" is currently the more achievable path. Consider what adjustments would bring "{name_a}" within reach.'
        elif fa and fb:
            guidance = "Both scenarios are feasible with your current capacity. The choice comes down to which trade-offs fit your priorities and comfort level."
        else:
            guidance = "Neither scenario is fully feasible with current inputs. Consider increasing savings capacity, extending your timeline or adjusting your income goal."

        tradeoffs = []
        if abs(a.monthly_income_goal - b.monthly_income_goal) > 100:
            (hi, hi_name), (lo, lo_name) = (
                ((a, name_a), (b, name_b)) if a.monthly_income_goal > b.monthly_income_goal else ((b, name_b), (a, name_a))
            )
            tradeoffs.append(
                f'"{hi_name}" targets {_money(hi.monthly_income_goal)}/month while '
                f'"{lo_name}" targets {_money(lo.monthly_income_goal)}/month. '
                f"That extra {_money(hi.monthly_income_goal - lo.monthly_income_goal)}/month requires a nest egg "
                f"{_money(abs(a.required_nest_egg - b.required_nest_egg))} larger, which means saving more or accepting more risk."
            )
        if abs(a.risk - b.risk) > 1:
            higher = name_a if a.risk > b.risk else name_b
            avg_years = round((a.years + b.years) / 2)
            tradeoffs.append(
                f"Risk levels differ: {a.risk:.1f}/10 versus {b.risk:.1f}/10, a "
                f"{abs(a.effective_return - b.effective_return) * 100:.1f}% difference in effective return. "
                f"Over {avg_years} years that compounds to a projected difference of about "
                f'{_money(abs(future_value(a) - future_value(b)))}, but "{higher}" comes with larger year-to-year swings.'
            )
        if abs(a.years - b.years) > 2:
            (longer, longer_name), (shorter, shorter_name) = (
                ((a, name_a), (b, name_b)) if a.years > b.years else ((b, name_b), (a, name_a))
            )
            extra = abs(a.years - b.years)
            tradeoffs.append(
                f'"{longer_name}" has {extra:g} more years than "{shorter_name}", letting compound growth build to a projected '
                f"{_money(future_value(longer))} versus {_money(future_value(shorter))}. "
                f"That time is powerful, but it also means {extra:g} more years before retirement."
            )
        if abs(a.savings_capacity - b.savings_capacity) > 100 and len(tradeoffs) < 3:
            more, less = (name_a, name_b) if a.savings_capacity > b.savings_capacity else (name_b, name_a)
            diff = abs(a.savings_capacity - b.savings_capacity)
            avg_years = round((a.years + b.years) / 2)
            tradeoffs.append(
                f'"{more}" saves {_money(diff)}/month more than "{less}". Even without returns that is '
                f"{_money(diff * avg_years * 12)} over {avg_years} years, and compounding widens the gap further."
            )
        if not tradeoffs:
            avg_years = round(((a.years or 20) + (b.years or 20)) / 2)
            tradeoffs = [
                "Both scenarios share similar parameters. Small differences in savings or risk compound over time: "
                f"even $50/month grows to {_money(50 * 12 * avg_years)} before investment returns.",
                "Consider which scenario you are most likely to follow consistently. The best plan is the one you actually carry out.",
            ]

        return {"synthesis": synthesis, "guidance": guidance, "tradeoffs": tradeoffs}

    def _scenario_report(self, score: ScoreContext, context: InsightRequest) -> Dict:
        s: Scenario = context.extra["scenario"]
        feasible = is_feasible(s)
        label, explain = risk_band(s.risk)
        income, nest_egg = _money(s.monthly_income_goal), _money(s.required_nest_egg)

        if s.mode == "contrib":
            gap = s.savings_capacity - (s.required_savings or 0)
            if feasible:
                overview = (
                    f"Your plan to generate {income}/month in retirement income is achievable within your current savings capacity. "
                    f"Over {s.years:g} years you need a nest egg of {nest_egg}, and your capacity exceeds the requirement by "
                    f"{_money(gap)}/month. Your {label.lower()} approach gives you a realistic path to this goal."
                )
            else:
                overview = (
                    f"Your goal of {income}/month in retirement income needs more than your current savings capacity supports. "
                    f"The shortfall is {_money(abs(gap))}/month. Adjusting your timeline, income target or risk level can close the gap, "
                    "and knowing where you stand is the essential first step."
                )
        elif s.mode == "return":
            required = f"{s.required_return * 100:.1f}%" if s.required_return is not None else "N/A"
            if feasible:
                overview = (
                    f"To reach {income}/month in retirement with your current savings plan you need an average annual return of {required}. "
                    "That is within the range of historical market returns, so the plan is achievable with disciplined investing."
                )
            else:
                overview = (
                    f"The return your goal requires ({required} annually) exceeds what diversified portfolios have historically delivered. "
                    "Increasing contributions, extending your timeline or adjusting your income target would bring it into range."
                )
        else:
            years_needed = f"{round(s.years_needed)}" if s.years_needed is not None and feasible else "N/A"
            overview = (
                f"At your current savings rate and investment approach you would need about {years_needed} years to build the "
                f"{nest_egg} nest egg required for {income}/month in retirement. This gives you a concrete target to plan around."
            )

        insights = []
        if s.mode == "contrib":
            required = _money(s.required_savings or 0)
            if feasible:
                insights.append(
                    f"Your savings capacity of {_money(s.savings_capacity)}/month exceeds the {required}/month required. "
                    "That surplus is a buffer for harder months and room to speed up your timeline."
                )
            else:
                insights.append(
                    f"The gap between your {_money(s.savings_capacity)}/month capacity and the {required}/month requirement "
                    "is a starting point, not a verdict. Partial progress still builds meaningful wealth."
                )
        elif s.mode == "return":
            insights.append(
                "The calculator solved for the return needed to reach your goal. Use it to judge whether the required "
                f"strategy fits your risk tolerance of {s.risk:.1f}/10."
            )
        else:
            insights.append(
                "Knowing how many years you need gives you a concrete milestone to revisit as your savings or returns change."
            )
        insights.append(
            f"Your risk level of {s.risk:.1f}/10 ({label}) maps to an effective return of "
            f"{s.effective_return * 100:.1f}% after conservative pacing. {explain}"
        )
        if s.years >= 20:
            insights.append(
                f"With {s.years:g} years until retirement, compound growth is your greatest asset. Starting now with modest amounts matters more than waiting for a perfect plan."
            )
        elif s.years >= 10:
            insights.append(
                f"With {s.years:g} years you have meaningful time for growth but less room to recover from downturns. Consistent contributions matter more than timing the market."
            )
        else:
            insights.append(
                f"With {s.years:g} years to retirement, protecting capital matters alongside growth. Balance growth assets with more stable options as you approach your date."
            )

        if feasible:
            target = s.required_savings if s.required_savings is not None else s.savings_capacity
            steps = [
                f"This week, check that your retirement contributions match or exceed {_money(target)}/month.",
                "Within 30 days, set up automatic transfers so contributions happen before the money can be spent elsewhere.",
                f"Every quarter, compare your balance against your {nest_egg} target nest egg.",
            ]
        else:
            steps = [
                f"This week, find one place to raise your monthly savings; even $50/month adds up over {s.years:g} years.",
                "Within 30 days, run a new scenario with an adjusted income goal or longer timeline that fits your capacity.",
                "Every quarter, revisit your plan as income and expenses change; a plan that does not work today may work with small adjustments.",
            ]

        return {"overview": overview, "key_insights": insights, "next_steps": steps}
