import pytest

from coach_backend.response_parser import parse
from coach_backend.schemas import InsightKind


def test_parse_leaf_exact_sections():
    out = parse("Pattern: A\nInsight: B\nAction: C\nRoot Belief: D", InsightKind.LEAF)
    assert out == {"pattern": "A", "insight": "B", "action": "C", "root_belief": "D"}


def test_parse_leaf_markers_on_own_lines():
    out = parse("Pattern:\nX\n\nInsight:\nY\n\nAction:\nZ\n\nRoot Belief:\nW", InsightKind.LEAF)
    assert out == {"pattern": "X", "insight": "Y", "action": "Z", "root_belief": "W"}


def test_parse_leaf_tolerates_markdown_and_case():
    raw = (
        "**Pattern:** You **avoid** the mail.\n"
        "## insight: It keeps the _fear_ small.\n"
        "ACTION: Open one letter.\n"
        "**Root Belief**: I cannot cope."
    )
    out = parse(raw, InsightKind.LEAF)
    assert out["pattern"] == "You avoid the mail."
    assert out["insight"] == "It keeps the fear small."
    assert out["action"] == "Open one letter."
    assert out["root_belief"] == "I cannot cope."


def test_parse_multiline_section_runs_to_next_marker():
    raw = "Pattern: first line\nsecond line\nInsight: x\nAction: y\nRoot Belief: z"
    assert parse(raw, InsightKind.LEAF)["pattern"] == "first line\nsecond line"


def test_parse_first_occurrence_wins():
    raw = "Pattern: one\nInsight: two\nPattern: three\nAction: a\nRoot Belief: b"
    out = parse(raw, InsightKind.LEAF)
    assert out["pattern"] == "one"
    assert out["insight"] == "two"


def test_parse_missing_markers_are_empty():
    out = parse("Pattern: only this one", InsightKind.LEAF)
    assert out == {"pattern": "only this one", "insight": "", "action": "", "root_belief": ""}


@pytest.mark.parametrize("raw", [None, "", "no markers at all", "Insight without colon"])
@pytest.mark.parametrize("kind", list(InsightKind))
def test_parse_never_raises(raw, kind):
    out = parse(raw, kind)
    assert all(v in ("", []) for v in out.values())


def test_parse_group_bullets_and_numbers():
    raw = (
        "Summary: The domain holds steady.\n"
        "Key Themes:\n"
        "- first theme\n"
        "• second theme\n"
        "3) third theme\n"
        "Priority Focus: start small"
    )
    out = parse(raw, InsightKind.GROUP_SYNTHESIS)
    assert out["key_themes"] == ["first theme", "second theme", "third theme"]
    assert out["priority_focus"] == "start small"


def test_parse_next_steps_numbered_only():
    raw = (
        "Overview: o\nIntegration: i\nCore Work: c\n"
        "Next Steps:\n"
        "1. **First** step\n"
        "not a step\n"
        "2) Second step\n"
    )
    out = parse(raw, InsightKind.OVERALL_SYNTHESIS)
    assert out["next_steps"] == ["First step", "Second step"]
    assert out["core_work"] == "c"


def test_parse_comparison_markers():
    raw = (
        "Synthesis: They differ.\n"
        "Decision Guidance: Pick the one you will follow.\n"
        "Key Trade-offs:\n"
        "1. Income\n"
        "2. Risk\n"
    )
    out = parse(raw, InsightKind.COMPARISON_SYNTHESIS)
    assert out["guidance"] == "Pick the one you will follow."
    assert out["tradeoffs"] == ["Income", "Risk"]


def test_parse_ignores_markers_of_other_kinds():
    raw = "Summary: s\nPattern: not a group marker\nKey Themes:\n- t\nPriority Focus: p"
    out = parse(raw, InsightKind.GROUP_SYNTHESIS)
    assert out["summary"] == "s\nPattern: not a group marker"
