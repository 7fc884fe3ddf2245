import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

CACHE_DB_NAME = "insights.sqlite"


@dataclass(frozen=True)
class KindSettings:
    model: str
    temperature: float
    max_tokens: int
    retry_backoff_ms: int = 2000
    min_field_length: int = 10
    min_narrative_length: int = 50
    min_list_length: int = 1
    min_steps_length: int = 2


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


def _default_kind_settings() -> Dict[str, KindSettings]:
    leaf_model = os.environ.get("LEAF_MODEL", "gpt-4o-mini")
    synthesis_model = os.environ.get("SYNTHESIS_MODEL", "gpt-4o")
    backoff = _env_int("RETRY_BACKOFF_MS", 2000)
    return {
        "leaf": KindSettings(leaf_model, 0.2, 400, backoff),
        "group_synthesis": KindSettings(synthesis_model, 0.3, 500, backoff),
        "overall_synthesis": KindSettings(synthesis_model, 0.3, 700, backoff),
        "comparison_synthesis": KindSettings(synthesis_model, 0.3, 750, backoff),
        "scenario_report": KindSettings(synthesis_model, 0.3, 800, backoff),
    }


@dataclass
class Config:
    openai_api_key: str = os.environ.get("OPENAI_API_KEY", "")
    llm_base_url: Optional[str] = os.environ.get("LLM_BASE_URL")
    use_llm: bool = os.environ.get("USE_LLM", "true").lower() == "true"
    llm_timeout: float = float(os.environ.get("LLM_TIMEOUT", 30))
    results_dir: str = os.environ.get("RESULTS_DIR", "coach_backend/results")
    cache_db: Optional[str] = os.environ.get("CACHE_DB")
    store_results: bool = os.environ.get("STORE_RESULTS", "true").lower() == "true"
    log_level: str = os.environ.get("LOG_LEVEL", "INFO")
    kinds: Dict[str, KindSettings] = field(default_factory=_default_kind_settings)

    def for_kind(self, kind) -> KindSettings:
        key = getattr(kind, "value", kind)
        return self.kinds[key]

    def with_backoff(self, retry_backoff_ms: int) -> "Config":
        kinds = {k: replace(v, retry_backoff_ms=retry_backoff_ms) for k, v in self.kinds.items()}
        return replace(self, kinds=kinds)


def resolve_cache_db(cfg: Config) -> Optional[str]:
    """Explicit CACHE_DB wins; otherwise results are stored under results_dir when enabled."""
    path = cfg.cache_db.strip() if isinstance(cfg.cache_db, str) else cfg.cache_db
    if path:
        return path
    if cfg.store_results:
        return os.path.join(cfg.results_dir, CACHE_DB_NAME)
    return None


CFG = Config()
CFG.cache_db = resolve_cache_db(CFG)
