import logging
from typing import Dict, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dotenv import load_dotenv
load_dotenv()
from coach_backend.config import CFG
from coach_backend.cache import build_cache
from coach_backend.fallback_log import build_fallback_log
from coach_backend.pipeline import TieredInsightPipeline
from coach_backend.schemas import AssessmentInsights, InsightResult, Scenario, ScoreContext
from coach_backend.synthesizer import HierarchicalSynthesizer
from coach_backend.tools import get_tool

logging.basicConfig(
    level=getattr(logging, CFG.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Coaching Insights")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

cache = build_cache(CFG)
fallback_log = build_fallback_log(CFG)
pipeline = TieredInsightPipeline(fallback_log=fallback_log, cfg=CFG)
synthesizer = HierarchicalSynthesizer(pipeline, cache)


class LeafIn(BaseModel):
    belief: Optional[float] = Field(default=None, ge=-3, le=3)
    behavior: Optional[float] = Field(default=None, ge=-3, le=3)
    feeling: Optional[float] = Field(default=None, ge=-3, le=3)
    consequence: Optional[float] = Field(default=None, ge=-3, le=3)
    response: str = ""


class SubmitIn(BaseModel):
    item_quotients: Dict[str, float] = Field(default_factory=dict)
    group_quotients: Dict[str, float] = Field(default_factory=dict)
    overall_quotient: Optional[float] = None


class CompareIn(BaseModel):
    student_id: str
    scenario_a: Scenario
    scenario_b: Scenario


class ReportIn(BaseModel):
    student_id: str
    scenario: Scenario


def _require_tool(tool_id: str, item_key: Optional[str] = None):
    tool = get_tool(tool_id)
    if tool is None:
        raise HTTPException(404, f"Unknown tool: {tool_id}")
    if item_key is not None and tool.item(item_key) is None:
        raise HTTPException(404, f"Unknown item for {tool_id}: {item_key}")
    return tool


async def _generate_and_store(tool_id: str, student_id: str, item_key: str, score: ScoreContext) -> None:
    prior = {k: v for k, v in cache.items(tool_id, student_id).items() if k != item_key}
    result = await pipeline.generate_leaf(score, tool_id, student_id, item_key, prior)
    cache.put(tool_id, student_id, item_key, result)
    logger.info("leaf insight stored %s/%s/%s source=%s", tool_id, student_id, item_key, result.source)


@app.get("/health")
def health():
    return {
        "ok": True,
        "use_llm": CFG.use_llm,
        "models": {kind: s.model for kind, s in CFG.kinds.items()},
        "cache": cache.backend,
    }


@app.post("/tools/{tool_id}/students/{student_id}/items/{item_key}/insight", status_code=202)
def request_leaf_insight(tool_id: str, student_id: str, item_key: str, body: LeafIn, background: BackgroundTasks):
    _require_tool(tool_id, item_key)
    aspects = body.model_dump(exclude={"response"}, exclude_none=True)
    score = ScoreContext(item_scores=aspects, free_text_by_item={item_key: body.response})
    background.add_task(_generate_and_store, tool_id, student_id, item_key, score)
    return {"status": "scheduled", "tool_id": tool_id, "student_id": student_id, "item_key": item_key}


@app.get("/tools/{tool_id}/students/{student_id}/items/{item_key}/insight", response_model=InsightResult)
def get_leaf_insight(tool_id: str, student_id: str, item_key: str):
    _require_tool(tool_id, item_key)
    result = cache.get(tool_id, student_id, item_key)
    if result is None:
        raise HTTPException(404, "No insight generated yet.")
    return result


@app.post("/tools/{tool_id}/students/{student_id}/submit", response_model=AssessmentInsights)
async def submit(tool_id: str, student_id: str, body: SubmitIn):
    _require_tool(tool_id)
    scores = ScoreContext(
        item_scores=body.item_quotients,
        group_quotients=body.group_quotients,
        overall_quotient=body.overall_quotient,
    )
    return await synthesizer.synthesize_assessment(tool_id, student_id, scores)


@app.delete("/tools/{tool_id}/students/{student_id}/insights")
def clear_insights(tool_id: str, student_id: str):
    _require_tool(tool_id)
    cache.clear(tool_id, student_id)
    return {"ok": True}


@app.post("/scenarios/compare", response_model=InsightResult)
async def compare_scenarios(body: CompareIn):
    return await synthesizer.synthesize_comparison(body.student_id, body.scenario_a, body.scenario_b)


@app.post("/scenarios/report", response_model=InsightResult)
async def scenario_report(body: ReportIn):
    return await synthesizer.synthesize_scenario(body.student_id, body.scenario)
