import asyncio
import re
from dataclasses import dataclass
from typing import Awaitable, Callable

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from splitly.exceptions import ExtractionError
from splitly.llm.prompts import build_extraction_prompt
from splitly.models.schemas import Expense, ParsedResult

_PROMPT_ECHO = re.compile(r"^<s>\s*\[INST\].*?\[/INST\]\s*", re.IGNORECASE | re.DOTALL)
_CODE_FENCE = re.compile(r"```(?:json)?\n?", re.IGNORECASE)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_seconds: float = 2.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return attempt * self.backoff_seconds


def clean_response(raw: str) -> str:
    """Strip an echoed instruction prefix and markdown code fences."""
    text = _PROMPT_ECHO.sub("", raw.strip())
    text = _CODE_FENCE.sub("", text)
    return text.strip()


def _clean_name(name: str) -> str:
    return name.strip().lower()


def _unique(names: list[str]) -> list[str]:
    seen: list[str] = []
    for name in names:
        name = _clean_name(name)
        if name and name not in seen:
            seen.append(name)
    return seen


def parse_extraction(raw: str) -> ParsedResult:
    """Decode, validate and normalize one language-model response.

    Validation is strict: numbers sent as strings and non-finite amounts are
    rejected rather than coerced. Raises pydantic's ``ValidationError`` (a
    ``ValueError``) when the response does not match ``ParsedResult``.
    """
    parsed = ParsedResult.model_validate_json(clean_response(raw), strict=True)

    expenses = [
        Expense(
            payer=_clean_name(e.payer), amount=e.amount, description=e.description.strip()
        )
        for e in parsed.expenses
    ]
    if any(not e.payer for e in expenses):
        raise ValueError("Expense without a payer")

    participants = _unique(parsed.participants)
    excluded = _unique(parsed.excluded)

    # Payers always come first
    missing = [p for p in _unique([e.payer for e in expenses]) if p not in participants]
    participants = missing + participants

    if excluded:
        participants = [p for p in participants if p not in excluded]
        primary = expenses[0].payer
        if primary not in participants:
            participants.insert(0, primary)

    return ParsedResult(participants=participants, expenses=expenses, excluded=excluded)


class ExpenseExtractor:
    """Turns free-text expense descriptions into ``ParsedResult`` via OpenRouter."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str = "https://openrouter.ai/api/v1",
        max_tokens: int = 300,
        temperature: float = 0.0,
        top_p: float = 0.9,
        policy: RetryPolicy | None = None,
        client=None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        # Retries are governed by ``policy``, not by the SDK
        self.client = client or AsyncOpenAI(base_url=base_url, api_key=api_key, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.top_p = top_p
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def _complete(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            top_p=self.top_p,
        )
        if not response.choices or not response.choices[0].message.content:
            raise ValueError("Invalid response format: no message content")
        raw = response.choices[0].message.content
        logger.debug("LLM raw response: {}", raw)
        return raw

    async def extract(
        self, text: str, currency: str, participants: list[str] | None = None
    ) -> ParsedResult:
        if not text or not text.strip():
            raise ExtractionError("Input is empty")

        prompt = build_extraction_prompt(text, currency, participants)
        attempts = self.policy.max_attempts
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                result = parse_extraction(await self._complete(prompt))
            except (OpenAIError, ValueError) as e:
                last_error = e
                logger.warning("Extraction attempt {}/{} failed: {}", attempt, attempts, e)
                if attempt < attempts:
                    await self._sleep(self.policy.delay(attempt))
                continue

            logger.info(
                "Extracted {} participant(s), {} expense(s), excluded={}",
                len(result.participants),
                len(result.expenses),
                result.excluded,
            )
            return result

        raise ExtractionError(
            f"AI parsing failed after {attempts} tries: {last_error}"
        ) from last_error
