from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Provenance = Literal["llm", "llm_retry", "fallback"]
FieldValue = Union[str, List[str]]


class InsightKind(str, Enum):
    LEAF = "leaf"
    GROUP_SYNTHESIS = "group_synthesis"
    OVERALL_SYNTHESIS = "overall_synthesis"
    COMPARISON_SYNTHESIS = "comparison_synthesis"
    SCENARIO_REPORT = "scenario_report"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoreContext(BaseModel):
    """Already-computed scores for one request level (item, group or whole assessment)."""

    model_config = ConfigDict(frozen=True)

    item_scores: Dict[str, float] = Field(default_factory=dict)
    group_quotients: Dict[str, float] = Field(default_factory=dict)
    overall_quotient: Optional[float] = None
    free_text_by_item: Dict[str, str] = Field(default_factory=dict)


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    monthly_income_goal: float = 0.0
    years: float = 0.0
    savings_capacity: float = 0.0
    current_assets: float = 0.0
    risk: float = Field(default=0.0, ge=0.0, le=10.0)
    required_nest_egg: float = 0.0
    effective_return: float = 0.0
    mode: Literal["contrib", "return", "time"] = "contrib"
    required_savings: Optional[float] = None
    required_return: Optional[float] = None
    years_needed: Optional[float] = None


class InsightResult(BaseModel):
    kind: InsightKind
    fields: Dict[str, FieldValue]
    source: Provenance
    generated_at: datetime = Field(default_factory=utcnow)
    error_detail: Optional[str] = None

    def text(self, name: str) -> str:
        value = self.fields.get(name, "")
        return value if isinstance(value, str) else "; ".join(value)

    def items(self, name: str) -> List[str]:
        value = self.fields.get(name, [])
        return list(value) if isinstance(value, list) else [value] if value else []


class FallbackLogEntry(BaseModel):
    timestamp: datetime = Field(default_factory=utcnow)
    student_id: str
    tool_id: str
    request_kind: InsightKind
    item_key: Optional[str] = None
    error_message: str = ""


@dataclass
class InsightRequest:
    kind: InsightKind
    score: ScoreContext = field(default_factory=ScoreContext)
    tool_id: str = ""
    student_id: str = ""
    item_key: Optional[str] = None
    group_key: Optional[str] = None
    prior_insights: Dict[str, InsightResult] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


class AssessmentInsights(BaseModel):
    tool_id: str
    student_id: str
    leaves: Dict[str, InsightResult] = Field(default_factory=dict)
    groups: Dict[str, InsightResult] = Field(default_factory=dict)
    overall: InsightResult
