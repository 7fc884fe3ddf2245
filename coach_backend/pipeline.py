import asyncio
import logging
from typing import Dict, Optional

from coach_backend.config import CFG, Config, KindSettings
from coach_backend.fallback_log import MemoryFallbackLog
from coach_backend.fallbacks import FallbackGenerator
from coach_backend.llm_gateway import LLMGateway
from coach_backend.prompts import build_prompts
from coach_backend.response_parser import parse
from coach_backend.schemas import FallbackLogEntry, InsightKind, InsightRequest, InsightResult, ScoreContext
from coach_backend.validator import is_valid

logger = logging.getLogger(__name__)

ATTEMPTS = (("llm", 0), ("llm_retry", 1))
DISABLED_REASON = "llm_disabled_or_missing_key"


class TieredInsightPipeline:
    """LLM attempt, one retry after a backoff, then the deterministic fallback.

    Every call returns an InsightResult. Only a defect in the fallback
    generator propagates.
    """

    def __init__(
        self,
        gateway: Optional[LLMGateway] = None,
        fallbacks: Optional[FallbackGenerator] = None,
        fallback_log=None,
        cfg: Config = CFG,
    ):
        self.cfg = cfg
        self.gateway = gateway if gateway is not None else LLMGateway(cfg)
        self.fallbacks = fallbacks or FallbackGenerator()
        self.fallback_log = fallback_log if fallback_log is not None else MemoryFallbackLog()

    def llm_enabled(self) -> bool:
        return self.cfg.use_llm and self.gateway is not None and self.gateway.available

    async def _attempt(self, request: InsightRequest, settings: KindSettings, prompts) -> Dict:
        system_prompt, user_prompt = prompts
        raw = await self.gateway.send(
            system_prompt, user_prompt, settings.model, settings.temperature, settings.max_tokens
        )
        partial = parse(raw, request.kind)
        if not is_valid(partial, request.kind, settings):
            raise ValueError(f"malformed {request.kind.value} response")
        return partial

    async def generate(self, request: InsightRequest, settings: Optional[KindSettings] = None) -> InsightResult:
        kind = InsightKind(request.kind)
        settings = settings or self.cfg.for_kind(kind)

        if not self.llm_enabled():
            return self._fallback(request, DISABLED_REASON)

        # a prompt that cannot be built fails the same way on retry
        try:
            prompts = build_prompts(request)
        except Exception as err:
            logger.warning("cannot build %s prompt for %s/%s/%s: %s", kind.value, request.tool_id,
                           request.student_id, request.item_key or request.group_key, err)
            return self._fallback(request, str(err))

        last_err = None
        for source, attempt in ATTEMPTS:
            if attempt:
                await asyncio.sleep(settings.retry_backoff_ms / 1000)
            try:
                fields = await self._attempt(request, settings, prompts)
            except Exception as err:
                last_err = err
                logger.warning("%s attempt %d failed for %s/%s/%s: %s", kind.value, attempt + 1,
                               request.tool_id, request.student_id, request.item_key or request.group_key, err)
                continue
            if attempt:
                logger.info("%s succeeded on retry for %s/%s", kind.value, request.tool_id, request.student_id)
            return InsightResult(kind=kind, fields=fields, source=source)

        return self._fallback(request, str(last_err) if last_err else "unknown")

    def _fallback(self, request: InsightRequest, reason: str) -> InsightResult:
        kind = InsightKind(request.kind)
        result = self.fallbacks.generate(request.score, kind, request)
        result = result.model_copy(update={"error_detail": reason})
        logger.warning("serving fallback %s for %s/%s/%s: %s", kind.value, request.tool_id,
                       request.student_id, request.item_key or request.group_key, reason)
        entry = FallbackLogEntry(
            student_id=request.student_id,
            tool_id=request.tool_id,
            request_kind=kind,
            item_key=request.item_key or request.group_key,
            error_message=reason,
        )
        try:
            self.fallback_log.record(entry)
        except Exception:
            logger.exception("failed to record fallback usage for %s/%s", request.tool_id, request.student_id)
        return result

    async def generate_leaf(
        self,
        score: ScoreContext,
        tool_id: str,
        student_id: str,
        item_key: str,
        prior_insights: Optional[Dict[str, InsightResult]] = None,
    ) -> InsightResult:
        request = InsightRequest(
            kind=InsightKind.LEAF,
            score=score,
            tool_id=tool_id,
            student_id=student_id,
            item_key=item_key,
            prior_insights=dict(prior_insights or {}),
        )
        return await self.generate(request)
