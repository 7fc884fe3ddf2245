import re
from typing import Dict, List, Tuple, Union

from coach_backend.schemas import InsightKind

# (marker, field, is_list) in output order
MARKERS: Dict[InsightKind, Tuple[Tuple[str, str, bool], ...]] = {
    InsightKind.LEAF: (
        ("Pattern", "pattern", False),
        ("Insight", "insight", False),
        ("Action", "action", False),
        ("Root Belief", "root_belief", False),
    ),
    InsightKind.GROUP_SYNTHESIS: (
        ("Summary", "summary", False),
        ("Key Themes", "key_themes", True),
        ("Priority Focus", "priority_focus", False),
    ),
    InsightKind.OVERALL_SYNTHESIS: (
        ("Overview", "overview", False),
        ("Integration", "integration", False),
        ("Core Work", "core_work", False),
        ("Next Steps", "next_steps", True),
    ),
    InsightKind.COMPARISON_SYNTHESIS: (
        ("Synthesis", "synthesis", False),
        ("Decision Guidance", "guidance", False),
        ("Key Trade-offs", "tradeoffs", True),
    ),
    InsightKind.SCENARIO_REPORT: (
        ("Overview", "overview", False),
        ("Key Insights", "key_insights", True),
        ("Next Steps", "next_steps", True),
    ),
}

BULLET_FIELDS = {"key_themes"}

_EMPHASIS = re.compile(r"\*\*|__|[*_]")
_NUMBERED = re.compile(r"^\s*\d+[.)]\s*")
_BULLETED = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s*")
_PATTERNS: Dict[InsightKind, "re.Pattern[str]"] = {}


def _pattern(kind: InsightKind) -> "re.Pattern[str]":
    if kind not in _PATTERNS:
        names = sorted((m[0] for m in MARKERS[kind]), key=len, reverse=True)
        alternation = "|".join(r"\s+".join(map(re.escape, n.split())) for n in names)
        _PATTERNS[kind] = re.compile(
            rf"^[ \t]*(?:#+[ \t]*)?[*_]*[ \t]*(?P<name>{alternation})[ \t]*[*_]*[ \t]*:[ \t]*[*_]*",
            re.IGNORECASE | re.MULTILINE,
        )
    return _PATTERNS[kind]


def _canonical(name: str) -> str:
    return " ".join(name.split()).lower()


def _clean(text: str) -> str:
    return _EMPHASIS.sub("", text).strip()


def _list_items(block: str, bullets: bool) -> List[str]:
    items = []
    for line in block.splitlines():
        if not bullets:
            line = _EMPHASIS.sub("", line)
        match = (_BULLETED if bullets else _NUMBERED).match(line)
        if not match:
            continue
        item = _clean(line[match.end():])
        if item:
            items.append(item)
    return items


def parse(raw_text: str, kind: InsightKind) -> Dict[str, Union[str, List[str]]]:
    """Split a marker-sectioned LLM reply into the fields of `kind`.

    Never raises. Missing sections come back as "" (or [] for list fields).
    """
    kind = InsightKind(kind)
    text = raw_text or ""
    by_name = {_canonical(m[0]): (m[1], m[2]) for m in MARKERS[kind]}
    out: Dict[str, Union[str, List[str]]] = {
        f: ([] if is_list else "") for _, f, is_list in MARKERS[kind]
    }

    matches = list(_pattern(kind).finditer(text))
    seen = set()
    for i, match in enumerate(matches):
        name = _canonical(match.group("name"))
        if name in seen:
            continue
        seen.add(name)
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        block = text[match.end():end]
        field, is_list = by_name[name]
        if is_list:
            out[field] = _list_items(block, bullets=field in BULLET_FIELDS)
        else:
            out[field] = _clean(block)
    return out
