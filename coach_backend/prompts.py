"""System/user prompt pairs, one builder per insight kind.

Every builder reads only what the request carries and the tool catalog.
Scores are embedded with their band wording so the reply's tone can follow
the numbers.
"""
import math
from typing import Callable, Dict, List, Tuple

from coach_backend.bands import (
    average,
    domain_balance,
    interpret_normalized_score,
    interpret_raw_score,
    is_feasible,
    leaf_pattern_label,
    quotient_band,
    quotient_band_label,
    risk_band,
)
from coach_backend.response_parser import MARKERS
from coach_backend.schemas import InsightKind, InsightRequest, InsightResult, Scenario
from coach_backend.tools import ToolConfig, get_tool

MAX_LIST_ITEMS = 5
ASPECTS = ("belief", "behavior", "feeling", "consequence")
MISSING_INSIGHT = "[No insight available - using fallback]"

TONE = {
    "healthy": "Affirm what is working and suggest ways to maintain or deepen it. Focus on \"keep doing X\" rather than \"fix Y\".",
    "mixed": "Acknowledge both strengths and gaps. Build on what works while naming what needs attention.",
    "problematic": "Address the disconnection compassionately but clearly. Give corrective, specific guidance on what needs to change.",
}

FORMAT_RULES = (
    "OUTPUT FORMAT:\n"
    "- Plain text only. No markdown: no **, no *, no _, no # headings.\n"
    "- Write each section label exactly as shown, followed by a colon, then your content.\n"
    "- Speak directly to the student (\"you\", \"your\").\n"
)


def _output_format(kind: InsightKind, hints: Dict[str, str]) -> str:
    lines = [FORMAT_RULES]
    for marker, field, _ in MARKERS[kind]:
        lines.append(f"{marker}:")
        lines.append(hints[field])
        lines.append("")
    return "\n".join(lines).rstrip()


def _require_tool(tool_id: str) -> ToolConfig:
    tool = get_tool(tool_id)
    if tool is None:
        raise ValueError(f"unknown tool: {tool_id}")
    return tool


def _fmt_money(value: float) -> str:
    return f"${round(value):,}"


# ---- leaf ----

def build_leaf_prompts(request: InsightRequest) -> Tuple[str, str]:
    tool = _require_tool(request.tool_id)
    item = tool.item(request.item_key or "")
    if item is None:
        raise ValueError(f"unknown item {request.item_key!r} for {tool.id}")

    scores = request.score.item_scores
    lines = []
    for aspect in ASPECTS:
        value = scores.get(aspect)
        if value is None:
            lines.append(f"- {aspect.title()}: not provided")
        else:
            lines.append(f"- {aspect.title()}: {value:g} ({interpret_raw_score(value)})")
    avg = average(scores.get(a) for a in ASPECTS)
    if avg is not None:
        label = leaf_pattern_label(avg)
        lines.append(f"- Average: {avg:.1f} ({label})")
        tone = {"HEALTHY PATTERN": "healthy", "PROBLEMATIC PATTERN": "problematic"}.get(label, "mixed")
    else:
        lines.append("- Average: not available")
        tone = "mixed"

    system = "\n".join([
        f'You are analyzing the "{item.label}" pattern from the {tool.name}.',
        "",
        "PATTERN DESCRIPTION:",
        item.description,
        "",
        "BELIEF TO BEHAVIOR CONNECTION:",
        item.connection,
        "",
        "STUDENT SCORES (raw scale -3 to +3, -3 most problematic, +3 healthiest):",
        *lines,
        "",
        "TONE:",
        TONE[tone],
        "",
        "Analyze the student's reflection in the context of these scores.",
        "",
        _output_format(InsightKind.LEAF, {
            "pattern": "(One sentence: the specific pattern in the reflection.)",
            "insight": "(One sentence: what the pattern and scores reveal.)",
            "action": "(One specific, actionable step.)",
            "root_belief": "(One sentence: the underlying belief driving this pattern.)",
        }),
    ])

    user = ""
    patterns = [
        (key, prior.text("pattern"))
        for key, prior in request.prior_insights.items()
        if prior.text("pattern")
    ][:MAX_LIST_ITEMS]
    if patterns:
        user += "Previous insights:\n"
        user += "".join(f"- {tool.label_for(key)}: {pattern}\n" for key, pattern in patterns)
        user += "\n"
    reflection = request.score.free_text_by_item.get(item.key) or "No response provided"
    user += f'Student\'s reflection:\n"{reflection}"'
    return system, user


# ---- group ----

def build_group_prompts(request: InsightRequest) -> Tuple[str, str]:
    tool = _require_tool(request.tool_id)
    group = tool.group(request.group_key or "")
    if group is None:
        raise ValueError(f"unknown group {request.group_key!r} for {tool.id}")

    item_quotients = request.score.group_quotients
    score_lines = [
        f'- "{item.label}": {round(item_quotients[item.key])} ({interpret_normalized_score(item_quotients[item.key])})'
        for item in group.items
        if item_quotients.get(item.key) is not None
    ]
    quotient = request.score.overall_quotient
    system = "\n".join([
        f'You are synthesizing the "{group.name}" domain of the {tool.name}.',
        "",
        "DOMAIN DESCRIPTION:",
        group.description,
        "",
        "PATTERN SCORES (0-100, 100 most problematic, 0 healthiest):",
        *(score_lines or ["- none available"]),
        "",
        (
            f"DOMAIN SCORE: {round(quotient)} ({interpret_normalized_score(quotient)})"
            if quotient is not None else "DOMAIN SCORE: not available"
        ),
        f"DOMAIN PATTERN: {quotient_band_label(quotient)}",
        "",
        "TONE:",
        TONE[quotient_band(quotient)],
        "",
        "Synthesize the pattern insights in the user message into one domain-level picture:",
        "common themes, how the patterns reinforce each other, and where to start.",
        "Refer to patterns by their names, never by their identifiers.",
        "",
        _output_format(InsightKind.GROUP_SYNTHESIS, {
            "summary": "(2-3 sentences synthesizing the domain.)",
            "key_themes": "- (most prominent theme)\n- (secondary theme)\n- (a strength or resource to work with)",
            "priority_focus": "(One sentence: where to start.)",
        }),
    ])

    blocks = []
    for item in group.items:
        leaf = request.prior_insights.get(item.key)
        if leaf is None:
            continue
        blocks.append(
            f'"{item.label}":\n'
            f"- Pattern: {leaf.text('pattern')}\n"
            f"- Insight: {leaf.text('insight')}\n"
            f"- Root Belief: {leaf.text('root_belief') or 'N/A'}"
        )
    user = "\n\n".join(blocks) if blocks else "No pattern insights are available for this domain."
    return system, user


# ---- overall ----

def build_overall_prompts(request: InsightRequest) -> Tuple[str, str]:
    tool = _require_tool(request.tool_id)
    score = request.score
    quotient = score.overall_quotient
    names = {g.key: g.name for g in tool.groups}

    group_lines = []
    for group in tool.groups:
        q = score.group_quotients.get(group.key)
        if q is not None:
            group_lines.append(f"- {group.name}: {round(q)} ({interpret_normalized_score(q)})")

    system = "\n".join([
        f'You are writing the overall synthesis for the "{tool.name}".',
        "",
        "ASSESSMENT PURPOSE:",
        tool.purpose,
        "",
        (
            f"OVERALL SCORE: {round(quotient)} ({interpret_normalized_score(quotient)})"
            if quotient is not None else "OVERALL SCORE: not available"
        ),
        "",
        "DOMAIN SCORES:",
        *(group_lines or ["- none available"]),
        "",
        f"OVERALL PATTERN: {quotient_band_label(quotient)}",
        "",
        "DOMAIN BALANCE:",
        domain_balance(names, score.group_quotients),
        "",
        "TONE:",
        TONE[quotient_band(quotient)],
        "",
        "The user message holds the domain syntheses and the pattern insights already shared",
        "with this student. Build on them; do not contradict them. A domain scoring below 25",
        "is a strength, not a problem.",
        "",
        _output_format(InsightKind.OVERALL_SYNTHESIS, {
            "overview": "(2-3 paragraphs connecting both domains.)",
            "integration": "(How the domains influence each other.)",
            "core_work": "(The fundamental shift needed.)",
            "next_steps": (
                "1. (action for the highest-scoring pattern, named with its score)\n"
                "2. (awareness practice for the student's specific pattern)\n"
                "3. (boundary or experiment for this week)\n"
                "4. (daily or weekly reflection practice)\n"
                "5. (30-day milestone)"
            ),
        }),
    ])

    sections = []
    for group in tool.groups:
        synthesis = request.prior_insights.get(group.key)
        if synthesis is None:
            continue
        themes = synthesis.items("key_themes")[:MAX_LIST_ITEMS]
        sections.append(
            f"{group.name}:\n"
            f"Summary: {synthesis.text('summary')}\n"
            f"Key Themes: {'; '.join(themes) if themes else 'N/A'}\n"
            f"Priority Focus: {synthesis.text('priority_focus')}"
        )

    leaves: Dict[str, InsightResult] = request.extra.get("leaf_results") or {}
    item_lines = ["PATTERN INSIGHTS (the overall narrative must align with these):"]
    for item in tool.items:
        item_q = score.item_scores.get(item.key)
        score_text = f"Score: {round(item_q)}" if item_q is not None else "Score: n/a"
        item_lines.append(f'\n"{item.label}" ({score_text}):')
        leaf = leaves.get(item.key)
        if leaf is None:
            item_lines.append(f"  {MISSING_INSIGHT}")
            continue
        item_lines.append(f"  Pattern: {leaf.text('pattern')}")
        item_lines.append(f"  Insight: {leaf.text('insight')}")
        item_lines.append(f"  Root Belief: {leaf.text('root_belief')}")
        item_lines.append(f"  Action: {leaf.text('action')}")

    user = "\n\n".join(sections + ["\n".join(item_lines)])
    return system, user


# ---- scenarios ----

def _scenario_lines(scenario: Scenario) -> List[str]:
    label, _ = risk_band(scenario.risk)
    lines = [
        f"- Monthly Income Goal: {_fmt_money(scenario.monthly_income_goal)}",
        f"- Years to Retirement: {scenario.years:g}",
        f"- Risk Level: {scenario.risk:.1f}/10 ({label})",
        f"- Savings Capacity: {_fmt_money(scenario.savings_capacity)}/mo",
        f"- Current Assets: {_fmt_money(scenario.current_assets)}",
        f"- Required Nest Egg: {_fmt_money(scenario.required_nest_egg)}",
        f"- Effective Return: {scenario.effective_return * 100:.1f}%",
    ]
    if scenario.required_savings is not None:
        gap = scenario.savings_capacity - scenario.required_savings
        lines.append(f"- Required Monthly Savings: {_fmt_money(scenario.required_savings)}")
        lines.append(f"- Surplus/Shortfall: {_fmt_money(gap)}/month")
    if scenario.required_return is not None:
        lines.append(f"- Required Annual Return: {scenario.required_return * 100:.2f}%")
    if scenario.years_needed is not None:
        needed = scenario.years_needed
        lines.append(f"- Years Needed: {round(needed) if math.isfinite(needed) else 'not reachable'}")
    lines.append(f"- Feasibility: {'FEASIBLE' if is_feasible(scenario) else 'NEEDS ADJUSTMENT'}")
    return lines


def _scenario_name(scenario: Scenario, default: str) -> str:
    return scenario.name or default


def build_comparison_prompts(request: InsightRequest) -> Tuple[str, str]:
    a: Scenario = request.extra["scenario_a"]
    b: Scenario = request.extra["scenario_b"]
    name_a, name_b = _scenario_name(a, "Scenario A"), _scenario_name(b, "Scenario B")
    system = "\n".join([
        "You are a financial education coach comparing two retirement planning scenarios for a student.",
        "",
        f'SCENARIO 1: "{name_a}"',
        *_scenario_lines(a),
        "",
        f'SCENARIO 2: "{name_b}"',
        *_scenario_lines(b),
        "",
        "GUIDELINES:",
        f'- Use the scenario names ("{name_a}" and "{name_b}"), never generic A/B.',
        "- Reference specific numbers from both scenarios.",
        "- Show how each difference compounds over the timeline, with approximate dollar impact.",
        "- Be clear on trade-offs without being prescriptive.",
        "",
        _output_format(InsightKind.COMPARISON_SYNTHESIS, {
            "synthesis": "(3-4 sentences on the key differences, with numbers.)",
            "guidance": "(2-3 sentences on which scenario may fit better and why.)",
            "tradeoffs": "1. (first trade-off with compounding impact)\n2. (second trade-off)\n3. (third trade-off)",
        }),
    ])
    user = f'Compare "{name_a}" and "{name_b}" using exactly the format above.'
    return system, user


def build_scenario_prompts(request: InsightRequest) -> Tuple[str, str]:
    scenario: Scenario = request.extra["scenario"]
    modes = {"contrib": "Monthly Savings Required", "return": "Returns Required", "time": "Years Required"}
    system = "\n".join([
        "You are a financial education coach writing a personalized analysis of a retirement planning scenario.",
        "",
        f'SCENARIO: "{_scenario_name(scenario, "Your Scenario")}"',
        f"- Calculation Mode: {modes[scenario.mode]}",
        *_scenario_lines(scenario),
        "",
        "GUIDELINES:",
        "- Ground every insight in the student's own numbers.",
        "- Be encouraging but honest about feasibility.",
        "- Be concise.",
        "",
        _output_format(InsightKind.SCENARIO_REPORT, {
            "overview": "(3-4 sentences on what the numbers mean for the student.)",
            "key_insights": "1. (feasibility)\n2. (risk and return)\n3. (timeline and compounding)",
            "next_steps": "1. (this week)\n2. (within 30 days)\n3. (every quarter)",
        }),
    ])
    user = "Write the analysis using exactly the format above."
    return system, user


BUILDERS: Dict[InsightKind, Callable[[InsightRequest], Tuple[str, str]]] = {
    InsightKind.LEAF: build_leaf_prompts,
    InsightKind.GROUP_SYNTHESIS: build_group_prompts,
    InsightKind.OVERALL_SYNTHESIS: build_overall_prompts,
    InsightKind.COMPARISON_SYNTHESIS: build_comparison_prompts,
    InsightKind.SCENARIO_REPORT: build_scenario_prompts,
}


def build_prompts(request: InsightRequest) -> Tuple[str, str]:
    return BUILDERS[InsightKind(request.kind)](request)
