"""Scenario orchestration.

Drives each raw scenario description through extraction, ledger
normalization, balance computation and settlement reduction, then hands the
finished record to the repository. Entries of a batch are processed one at a
time and fail independently of each other.
"""

import asyncio
import datetime as dt

from loguru import logger

from splitly.db.repository import ScenarioRepository
from splitly.engine.balances import compute_balances
from splitly.engine.normalizer import NormalizedLedger, normalize
from splitly.engine.settlement import reduce_to_settlements
from splitly.exceptions import (
    BatchFailedError,
    DegenerateLedgerError,
    ExtractionError,
    InputValidationError,
    SplitlyError,
)
from splitly.llm.extractor import ExpenseExtractor
from splitly.models.schemas import (
    Balance,
    BatchResult,
    CreateScenariosRequest,
    DailyTotal,
    ParsedResult,
    RawScenario,
    Scenario,
    ScenarioFailure,
    ScenarioPreview,
    Settlement,
)
from splitly.services.analytics import daily_totals

MISSING_FIELDS_REASON = "missing input or date"
EXTRACTION_FAILED_REASON = "AI parsing failed, use clearer input"
INPUT_PREVIEW_LENGTH = 50


def parse_scenario_date(value: str) -> dt.date:
    """Parse an ISO date, falling back to a loose ``YYYY-M-D`` reading."""
    value = value.strip()
    try:
        return dt.datetime.fromisoformat(value).date()
    except ValueError:
        pass
    try:
        year, month, day = (int(part) for part in value.split("-")[:3])
        return dt.date(year, month, day)
    except ValueError as e:
        raise InputValidationError("Invalid date, use YYYY-MM-DD") from e


def settle_ledger(
    parsed: ParsedResult, body_excluded: list[str] | None = None
) -> tuple[NormalizedLedger, list[Balance], list[Settlement]]:
    """Normalize an extraction and compute its balances and settlements."""
    ledger = normalize(parsed, body_excluded)
    if not ledger.sharers:
        raise DegenerateLedgerError("No one to share the expense with after exclusions")

    balances = compute_balances(ledger.participants, parsed.expenses, ledger.excluded)
    return ledger, balances, reduce_to_settlements(balances)


def _truncate(text: str) -> str:
    return text[:INPUT_PREVIEW_LENGTH] + "..."


class ScenarioService:
    def __init__(self, extractor: ExpenseExtractor, repo: ScenarioRepository):
        self.extractor = extractor
        self.repo = repo

    async def preview(
        self, text: str, currency: str, participants: list[str] | None = None
    ) -> ScenarioPreview:
        parsed = await self.extractor.extract(text, currency, participants or [])
        ledger, balances, settlements = settle_ledger(parsed)
        return ScenarioPreview(
            participants=ledger.participants,
            expenses=parsed.expenses,
            excluded=ledger.excluded,
            balances=balances,
            settlements=settlements,
        )

    async def create_scenarios(self, user_id: str, request: CreateScenariosRequest) -> BatchResult:
        """Create one scenario per raw entry.

        Raises ``InputValidationError`` before any work when the request
        itself is incomplete, and ``BatchFailedError`` when every entry failed.
        """
        if not request.category or not request.category.strip():
            raise InputValidationError("Category required")
        if not request.participants:
            raise InputValidationError("Participants required")
        if not request.scenarios:
            raise InputValidationError("Scenarios array required")

        result = BatchResult()
        for index, entry in enumerate(request.scenarios, 1):
            if not entry.input or not entry.input.strip() or not entry.date:
                logger.warning("Scenario {} skipped: {}", index, MISSING_FIELDS_REASON)
                result.failed.append(ScenarioFailure(index=index, reason=MISSING_FIELDS_REASON))
                continue

            try:
                scenario = await self._create_one(user_id, index, entry, request)
            except SplitlyError as e:
                logger.error("Scenario {} failed: {}", index, e)
                reason = EXTRACTION_FAILED_REASON if isinstance(e, ExtractionError) else str(e)
                result.failed.append(
                    ScenarioFailure(index=index, input=_truncate(entry.input), reason=reason)
                )
                continue

            result.created.append(scenario)

        if not result.created:
            raise BatchFailedError(result.failed)
        return result

    async def _create_one(
        self, user_id: str, index: int, entry: RawScenario, request: CreateScenariosRequest
    ) -> Scenario:
        logger.info("Parsing scenario {}: {}", index, entry.input)
        parsed = await self.extractor.extract(entry.input, request.currency, request.participants)

        ledger, balances, settlements = settle_ledger(parsed, entry.excluded)
        logger.info("Scenario {} excluded: {}", index, ledger.excluded)

        scenario = Scenario(
            user_id=user_id,
            category=request.category,
            currency=request.currency,
            input=entry.input,
            participants=ledger.participants,
            expenses=parsed.expenses,
            balances=balances,
            settlements=settlements,
            date=parse_scenario_date(entry.date),
            excluded=ledger.excluded,
        )
        saved = await asyncio.to_thread(self.repo.add, scenario)
        logger.info("Scenario {} saved as #{}", index, saved.id)
        return saved

    def list_scenarios(self, user_id: str, category: str | None = None) -> list[Scenario]:
        return self.repo.list_for_user(user_id, category=category)

    def get_scenario(self, id: int, user_id: str) -> Scenario | None:
        return self.repo.get(id, user_id)

    def delete_scenario(self, id: int, user_id: str) -> bool:
        deleted = self.repo.delete(id, user_id)
        if deleted:
            logger.info("Deleted scenario #{}", id)
        return deleted

    def daily_totals(self, user_id: str, category: str | None = None) -> list[DailyTotal]:
        return daily_totals(self.repo.list_for_user(user_id), category=category)
