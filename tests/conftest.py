import os

# Config is read from the environment at import time.
os.environ["USE_LLM"] = "false"
os.environ["STORE_RESULTS"] = "false"
os.environ["OPENAI_API_KEY"] = ""
os.environ.pop("CACHE_DB", None)

from dataclasses import replace

import pytest

from coach_backend.config import CFG
from coach_backend.fallback_log import MemoryFallbackLog
from coach_backend.pipeline import TieredInsightPipeline

LEAF_REPLY = (
    "Pattern: You avoid opening statements when money feels tight.\n"
    "Insight: Avoidance protects you from shame but hides the real numbers.\n"
    "Action: Open one statement this week and write down the balance.\n"
    "Root Belief: Seeing the numbers would prove I am failing."
)

GROUP_REPLY = (
    "Summary: Your patterns in this domain reinforce each other, keeping the full picture out of view.\n"
    "Key Themes:\n"
    "- Avoiding the numbers when they feel threatening\n"
    "- Measuring worth by financial outcomes\n"
    "- A real willingness to look once you feel safe\n"
    "Priority Focus: Start with the pattern that scored highest and practice its action step."
)

OVERALL_REPLY = (
    "Overview: Both domains show how you step away from your own financial reality when it feels unsafe.\n"
    "Integration: When you cannot see clearly you lean on others, and leaning on others blurs your view further.\n"
    "Core Work: Build internal authority by looking at your finances directly and trusting what you see.\n"
    "Next Steps:\n"
    "1. Review your highest-scoring pattern and practice its action daily.\n"
    "2. Write down one moment each day when you looked away from a number.\n"
    "3. Make one money decision this week without asking anyone."
)


class FakeGateway:
    """Scripted stand-in for LLMGateway. Each reply is a string or an exception to raise."""

    available = True

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def send(self, system_prompt, user_prompt, model, temperature, max_tokens):
        self.calls.append({
            "system": system_prompt,
            "user": user_prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class RoutingGateway(FakeGateway):
    """Answers by kind, recognised from the output format in the system prompt."""

    def __init__(self):
        super().__init__("")

    async def send(self, system_prompt, user_prompt, model, temperature, max_tokens):
        await super().send(system_prompt, user_prompt, model, temperature, max_tokens)
        if "Integration:" in system_prompt:
            return OVERALL_REPLY
        if "Priority Focus:" in system_prompt:
            return GROUP_REPLY
        return LEAF_REPLY


def make_cfg(backoff_ms=5, use_llm=True):
    return replace(CFG, use_llm=use_llm).with_backoff(backoff_ms)


@pytest.fixture
def fallback_log():
    return MemoryFallbackLog()


@pytest.fixture
def make_pipeline(fallback_log):
    def _make(gateway, backoff_ms=5, use_llm=True):
        return TieredInsightPipeline(
            gateway=gateway,
            fallback_log=fallback_log,
            cfg=make_cfg(backoff_ms, use_llm),
        )
    return _make
