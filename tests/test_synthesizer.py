import asyncio

from coach_backend.cache import MemoryInsightCache
from coach_backend.prompts import MISSING_INSIGHT
from coach_backend.schemas import InsightKind, InsightResult, Scenario, ScoreContext
from coach_backend.synthesizer import HierarchicalSynthesizer

from conftest import RoutingGateway


def _leaf(pattern):
    return InsightResult(
        kind=InsightKind.LEAF,
        fields={"pattern": pattern, "insight": f"{pattern} insight", "action": "act", "root_belief": "belief"},
        source="llm",
    )


SCORES = ScoreContext(
    item_scores={"subdomain_1_1": 70, "subdomain_1_2": 40, "subdomain_1_3": 55,
                 "subdomain_2_1": 20, "subdomain_2_2": 10, "subdomain_2_3": 15},
    group_quotients={"domain1": 55, "domain2": 15},
    overall_quotient=35,
)


def _synth(make_pipeline, cache=None):
    gateway = RoutingGateway()
    return HierarchicalSynthesizer(make_pipeline(gateway), cache or MemoryInsightCache()), gateway


def test_assessment_runs_groups_in_order_then_overall(make_pipeline):
    cache = MemoryInsightCache()
    for key in ("subdomain_2_1", "subdomain_1_1"):
        cache.put("tool3", "dana", key, _leaf(f"pattern-{key}"))
    synthesizer, gateway = _synth(make_pipeline, cache)

    bundle = asyncio.run(synthesizer.synthesize_assessment("tool3", "dana", SCORES))

    assert list(bundle.groups) == ["domain1", "domain2"]
    assert list(bundle.leaves) == ["subdomain_1_1", "subdomain_2_1"]
    assert bundle.overall.source == "llm"
    assert all(g.source == "llm" for g in bundle.groups.values())
    assert len(gateway.calls) == 3
    assert '"False Self-View"' in gateway.calls[0]["system"]
    assert '"External Validation"' in gateway.calls[1]["system"]
    assert "Integration:" in gateway.calls[2]["system"]


def test_group_prompt_omits_missing_leaves(make_pipeline):
    synthesizer, gateway = _synth(make_pipeline)
    leaves = {"subdomain_1_2": _leaf("scarcity"), "bogus": _leaf("ignored")}
    scores = ScoreContext(group_quotients={"subdomain_1_2": 40}, overall_quotient=40)

    result = asyncio.run(synthesizer.synthesize_group("tool3", "dana", "domain1", leaves, scores))

    assert result.source == "llm"
    user = gateway.calls[0]["user"]
    assert "I'll Never Have Enough" in user
    assert "I'm Not Worthy of Financial Freedom" not in user
    assert "ignored" not in user


def test_overall_prompt_marks_missing_leaves(make_pipeline):
    cache = MemoryInsightCache()
    cache.put("tool3", "erin", "subdomain_1_1", _leaf("unworthy"))
    cache.put("tool3", "erin", "subdomain_9_9", _leaf("stray"))
    synthesizer, gateway = _synth(make_pipeline, cache)

    bundle = asyncio.run(synthesizer.synthesize_assessment("tool3", "erin", SCORES))

    assert "subdomain_9_9" not in bundle.leaves
    overall_user = gateway.calls[-1]["user"]
    assert overall_user.count(MISSING_INSIGHT) == 5
    assert "Pattern: unworthy" in overall_user
    assert overall_user.index("False Self-View:") < overall_user.index("External Validation:")


def test_assessment_with_no_leaves_still_completes(make_pipeline):
    synthesizer, _ = _synth(make_pipeline)
    bundle = asyncio.run(synthesizer.synthesize_assessment("tool5", "frank", ScoreContext()))
    assert bundle.leaves == {}
    assert set(bundle.groups) == {"domain1", "domain2"}
    assert bundle.overall.items("next_steps")


def test_comparison_and_report_fall_back_when_llm_is_off(make_pipeline, fallback_log):
    synthesizer = HierarchicalSynthesizer(make_pipeline(RoutingGateway(), use_llm=False))
    a = Scenario(name="Plan A", monthly_income_goal=4000, years=20, savings_capacity=900,
                 required_nest_egg=1_000_000, effective_return=0.05, mode="contrib", required_savings=800)
    b = a.model_copy(update={"name": "Plan B", "risk": 6.0})

    comparison = asyncio.run(synthesizer.synthesize_comparison("gail", a, b))
    report = asyncio.run(synthesizer.synthesize_scenario("gail", a))

    assert comparison.kind == InsightKind.COMPARISON_SYNTHESIS
    assert comparison.source == "fallback"
    assert report.kind == InsightKind.SCENARIO_REPORT
    assert len(report.items("next_steps")) == 3
    assert [e.request_kind for e in fallback_log.entries()] == [
        InsightKind.COMPARISON_SYNTHESIS, InsightKind.SCENARIO_REPORT,
    ]
