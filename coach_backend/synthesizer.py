import logging
from typing import Dict, Mapping, Optional

from coach_backend.pipeline import TieredInsightPipeline
from coach_backend.schemas import AssessmentInsights, InsightKind, InsightRequest, InsightResult, Scenario, ScoreContext
from coach_backend.tools import ToolConfig, get_tool

logger = logging.getLogger(__name__)


def _ordered(keys, results: Mapping[str, InsightResult]) -> Dict[str, InsightResult]:
    """Keep only configured keys, in configuration order. Unknown keys are dropped."""
    return {k: results[k] for k in keys if k in results}


class HierarchicalSynthesizer:
    """Composes cached leaf insights into group and whole-assessment syntheses."""

    def __init__(self, pipeline: TieredInsightPipeline, cache=None):
        self.pipeline = pipeline
        self.cache = cache

    def _tool(self, tool_id: str) -> ToolConfig:
        tool = get_tool(tool_id)
        if tool is None:
            raise KeyError(f"unknown tool: {tool_id}")
        return tool

    async def synthesize_group(
        self,
        tool_id: str,
        student_id: str,
        group_key: str,
        leaf_results: Mapping[str, InsightResult],
        group_scores: ScoreContext,
    ) -> InsightResult:
        tool = self._tool(tool_id)
        group = tool.group(group_key)
        if group is None:
            raise KeyError(f"unknown group {group_key} for {tool_id}")
        leaves = _ordered(group.item_keys, leaf_results)
        if len(leaves) < len(group.items):
            logger.info("group %s/%s has %d of %d leaf insights", tool_id, group_key, len(leaves), len(group.items))
        request = InsightRequest(
            kind=InsightKind.GROUP_SYNTHESIS,
            score=group_scores,
            tool_id=tool_id,
            student_id=student_id,
            group_key=group_key,
            prior_insights=leaves,
        )
        return await self.pipeline.generate(request)

    async def synthesize_overall(
        self,
        tool_id: str,
        student_id: str,
        group_syntheses: Mapping[str, InsightResult],
        overall_scores: ScoreContext,
        leaf_results: Optional[Mapping[str, InsightResult]] = None,
    ) -> InsightResult:
        tool = self._tool(tool_id)
        request = InsightRequest(
            kind=InsightKind.OVERALL_SYNTHESIS,
            score=overall_scores,
            tool_id=tool_id,
            student_id=student_id,
            prior_insights=_ordered([g.key for g in tool.groups], group_syntheses),
            extra={"leaf_results": _ordered([i.key for i in tool.items], leaf_results or {})},
        )
        return await self.pipeline.generate(request)

    async def synthesize_comparison(self, student_id: str, scenario_a: Scenario, scenario_b: Scenario) -> InsightResult:
        request = InsightRequest(
            kind=InsightKind.COMPARISON_SYNTHESIS,
            tool_id="tool8",
            student_id=student_id,
            extra={"scenario_a": scenario_a, "scenario_b": scenario_b},
        )
        return await self.pipeline.generate(request)

    async def synthesize_scenario(self, student_id: str, scenario: Scenario) -> InsightResult:
        request = InsightRequest(
            kind=InsightKind.SCENARIO_REPORT,
            tool_id="tool8",
            student_id=student_id,
            extra={"scenario": scenario},
        )
        return await self.pipeline.generate(request)

    async def synthesize_assessment(self, tool_id: str, student_id: str, scores: ScoreContext) -> AssessmentInsights:
        """Group syntheses in configured order, then the overall synthesis.

        `scores.item_scores` holds item quotients, `scores.group_quotients`
        group quotients and `scores.overall_quotient` the assessment quotient.
        """
        tool = self._tool(tool_id)
        cached = self.cache.items(tool_id, student_id) if self.cache is not None else {}
        leaves = _ordered([i.key for i in tool.items], cached)

        groups: Dict[str, InsightResult] = {}
        for group in tool.groups:
            group_scores = ScoreContext(
                group_quotients={k: scores.item_scores[k] for k in group.item_keys if k in scores.item_scores},
                overall_quotient=scores.group_quotients.get(group.key),
            )
            groups[group.key] = await self.synthesize_group(tool_id, student_id, group.key, leaves, group_scores)

        overall = await self.synthesize_overall(tool_id, student_id, groups, scores, leaves)
        return AssessmentInsights(tool_id=tool_id, student_id=student_id, leaves=leaves, groups=groups, overall=overall)
