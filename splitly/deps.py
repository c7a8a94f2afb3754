from functools import lru_cache

from splitly.config import Settings, get_settings
from splitly.db.repository import ScenarioRepository
from splitly.llm.extractor import ExpenseExtractor, RetryPolicy
from splitly.services.scenarios import ScenarioService


def build_service(settings: Settings) -> ScenarioService:
    repo = ScenarioRepository(settings.db_path)
    extractor = ExpenseExtractor(
        api_key=settings.openrouter_api_key,
        model=settings.llm_model,
        base_url=settings.openrouter_base_url,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        top_p=settings.llm_top_p,
        policy=RetryPolicy(
            max_attempts=settings.extraction_max_attempts,
            backoff_seconds=settings.extraction_backoff_seconds,
        ),
    )
    return ScenarioService(extractor, repo)


@lru_cache
def get_service() -> ScenarioService:
    return build_service(get_settings())
