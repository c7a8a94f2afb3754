import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Expense(BaseModel):
    payer: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    description: str


class ParsedResult(BaseModel):
    """Structured expense data as returned by the language model."""

    participants: list[str] = Field(min_length=1)
    expenses: list[Expense] = Field(min_length=1)
    excluded: list[str] = []

    @field_validator("excluded", mode="before")
    @classmethod
    def _missing_excluded(cls, value):
        return [] if value is None else value


class Balance(BaseModel):
    name: str
    balance: float


class Settlement(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    amount: float = Field(gt=0)


class Scenario(BaseModel):
    id: int | None = None
    user_id: str
    category: str
    currency: str = "USD"
    input: str
    participants: list[str] = []
    expenses: list[Expense] = []
    balances: list[Balance] = []
    settlements: list[Settlement] = []
    date: dt.date
    excluded: list[str] = []
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)


class RawScenario(BaseModel):
    input: str | None = None
    date: str | None = None
    excluded: list[str] = []


class CreateScenariosRequest(BaseModel):
    scenarios: list[RawScenario] = []
    participants: list[str] = []
    category: str | None = None
    currency: str = "USD"


class ScenarioFailure(BaseModel):
    index: int
    input: str | None = None
    reason: str


class BatchResult(BaseModel):
    created: list[Scenario] = []
    failed: list[ScenarioFailure] = []


class CreateScenariosResponse(BaseModel):
    scenarios: list[Scenario]
    failures: list[ScenarioFailure] = []


class ExtractRequest(BaseModel):
    input: str
    currency: str = "USD"
    participants: list[str] = []


class ScenarioPreview(BaseModel):
    participants: list[str]
    expenses: list[Expense]
    excluded: list[str]
    balances: list[Balance]
    settlements: list[Settlement]


class DailyTotal(BaseModel):
    date: dt.date
    total: float
    currency: str
    payers: list[str]
    categories: list[str]
