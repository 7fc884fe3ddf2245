import pytest

from coach_backend.prompts import MAX_LIST_ITEMS, build_prompts
from coach_backend.schemas import InsightKind, InsightRequest, InsightResult, Scenario, ScoreContext


def _leaf(pattern):
    return InsightResult(kind=InsightKind.LEAF, source="llm",
                         fields={"pattern": pattern, "insight": "i", "action": "a", "root_belief": "r"})


def test_leaf_prompt_embeds_scores_and_reflection():
    request = InsightRequest(
        kind=InsightKind.LEAF,
        score=ScoreContext(item_scores={"belief": -3, "behavior": -2, "feeling": -1, "consequence": 0},
                           free_text_by_item={"subdomain_2_2": "I hide purchases from my family."}),
        tool_id="tool3", student_id="s", item_key="subdomain_2_2",
    )
    system, user = build_prompts(request)
    assert '"What Will They Think?"' in system
    assert "- Belief: -3 (highly problematic)" in system
    assert "- Feeling: -1 (somewhat problematic)" in system
    assert "- Consequence: 0 (neutral)" in system
    assert "- Average: -1.5 (PROBLEMATIC PATTERN)" in system
    assert system.index("Pattern:") < system.index("Insight:") < system.index("Action:") < system.index("Root Belief:")
    assert "No markdown" in system
    assert '"I hide purchases from my family."' in user


def test_leaf_prompt_caps_prior_patterns():
    priors = {f"k{i}": _leaf(f"prior pattern {i}") for i in range(8)}
    request = InsightRequest(kind=InsightKind.LEAF, score=ScoreContext(item_scores={"belief": 2}),
                             tool_id="tool7", student_id="s", item_key="subdomain_1_1", prior_insights=priors)
    _, user = build_prompts(request)
    assert user.count("prior pattern") == MAX_LIST_ITEMS
    assert "prior pattern 0" in user and "prior pattern 5" not in user
    assert "No response provided" in user


def test_group_prompt_bands_and_scores():
    request = InsightRequest(
        kind=InsightKind.GROUP_SYNTHESIS,
        score=ScoreContext(group_quotients={"subdomain_1_1": 82, "subdomain_1_2": 61}, overall_quotient=70),
        tool_id="tool5", student_id="s", group_key="domain1",
    )
    system, _ = build_prompts(request)
    assert '- "I Must Give to Be Loved": 82 (critical pattern)' in system
    assert '- "Their Needs > My Needs": 61 (significant pattern)' in system
    assert "DOMAIN PATTERN: PROBLEMATIC (65+)" in system


def test_overall_prompt_includes_balance_and_all_items():
    request = InsightRequest(
        kind=InsightKind.OVERALL_SYNTHESIS,
        score=ScoreContext(group_quotients={"domain1": 30, "domain2": 34}, overall_quotient=32,
                           item_scores={"subdomain_1_1": 30}),
        tool_id="tool7", student_id="s",
        extra={"leaf_results": {"subdomain_1_1": _leaf("control")}},
    )
    system, user = build_prompts(request)
    assert "Both domains are relatively balanced." in system
    assert "OVERALL PATTERN: MIXED (25-64)" in system
    assert '"I Must Control Everything" (Score: 30)' in user
    assert user.count("[No insight available - using fallback]") == 5


def test_overall_prompt_caps_carried_themes():
    themes = [f"theme {i}" for i in range(7)]
    group = InsightResult(kind=InsightKind.GROUP_SYNTHESIS, source="llm",
                          fields={"summary": "s", "key_themes": themes, "priority_focus": "p"})
    request = InsightRequest(kind=InsightKind.OVERALL_SYNTHESIS, tool_id="tool3", student_id="s",
                             prior_insights={"domain1": group})
    _, user = build_prompts(request)
    assert "theme 4" in user and "theme 5" not in user


def test_comparison_prompt_uses_scenario_names():
    a = Scenario(name="Slow and Sure", monthly_income_goal=4000, years=30, risk=1.5,
                 mode="return", required_return=0.04)
    b = Scenario(name="Fast Track", monthly_income_goal=4000, years=12, risk=9,
                 mode="return", required_return=0.31)
    request = InsightRequest(kind=InsightKind.COMPARISON_SYNTHESIS, student_id="s",
                             extra={"scenario_a": a, "scenario_b": b})
    system, user = build_prompts(request)
    assert 'SCENARIO 1: "Slow and Sure"' in system
    assert "Very Low Risk/Low Returns" in system
    assert "High Risk/High Reward" in system
    assert "- Required Annual Return: 31.00%" in system
    assert "Decision Guidance:" in system and "Key Trade-offs:" in system
    assert '"Fast Track"' in user


def test_unknown_tool_raises():
    with pytest.raises(ValueError):
        build_prompts(InsightRequest(kind=InsightKind.LEAF, tool_id="tool99", item_key="x"))


def test_unreachable_years_needed_is_described_not_rounded():
    stuck = Scenario(name="Stuck", monthly_income_goal=6000, years=15, mode="time", years_needed=float("inf"))
    steady = Scenario(name="Steady", monthly_income_goal=3000, years=25, mode="time", years_needed=22.4)
    request = InsightRequest(kind=InsightKind.COMPARISON_SYNTHESIS, student_id="s",
                             extra={"scenario_a": stuck, "scenario_b": steady})
    system, _ = build_prompts(request)
    assert "- Years Needed: not reachable" in system
    assert "- Years Needed: 22" in system
