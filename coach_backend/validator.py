from typing import Dict, List, Optional, Union

from coach_backend.config import CFG, KindSettings
from coach_backend.response_parser import MARKERS
from coach_backend.schemas import InsightKind

NARRATIVE_FIELDS = {
    InsightKind.COMPARISON_SYNTHESIS: {"synthesis"},
    InsightKind.SCENARIO_REPORT: {"overview"},
}
STEPS_FIELDS = {"next_steps"}


def required_fields(kind: InsightKind) -> List[str]:
    return [field for _, field, _ in MARKERS[InsightKind(kind)]]


def is_valid(
    partial: Dict[str, Union[str, List[str]]],
    kind: InsightKind,
    settings: Optional[KindSettings] = None,
) -> bool:
    """True when every required field of `kind` meets its minimum length."""
    kind = InsightKind(kind)
    settings = settings or CFG.for_kind(kind)
    narrative = NARRATIVE_FIELDS.get(kind, set())

    for _, field, is_list in MARKERS[kind]:
        value = partial.get(field)
        if is_list:
            if not isinstance(value, list):
                return False
            items = [v for v in value if isinstance(v, str) and v.strip()]
            minimum = settings.min_steps_length if field in STEPS_FIELDS else settings.min_list_length
            if len(items) < minimum:
                return False
        else:
            if not isinstance(value, str):
                return False
            minimum = settings.min_narrative_length if field in narrative else settings.min_field_length
            if len(value.strip()) < minimum:
                return False
    return True
