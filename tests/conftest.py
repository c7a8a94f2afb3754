"""Shared fakes for the language model and the scenario store."""

import json
from types import SimpleNamespace

import pytest

from splitly.db.repository import ScenarioRepository
from splitly.exceptions import ExtractionError
from splitly.llm.extractor import ExpenseExtractor, RetryPolicy, parse_extraction


def completion(content: str | None):
    """Build an object shaped like a chat-completions response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeCompletions:
    """Replays scripted replies: strings become completions, exceptions are raised."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return completion(reply)


class FakeClient:
    def __init__(self, replies):
        self.chat = SimpleNamespace(completions=FakeCompletions(replies))

    @property
    def calls(self):
        return self.chat.completions.calls


class SleepRecorder:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_extractor(replies, policy: RetryPolicy | None = None):
    client = FakeClient(replies)
    sleep = SleepRecorder()
    extractor = ExpenseExtractor(
        api_key="test_key", model="test-model", client=client, policy=policy, sleep=sleep
    )
    return extractor, client, sleep


def oracle_json(participants, expenses, excluded=None) -> str:
    payload = {
        "participants": participants,
        "expenses": [
            {"payer": payer, "amount": amount, "description": description}
            for payer, amount, description in expenses
        ],
    }
    if excluded is not None:
        payload["excluded"] = excluded
    return json.dumps(payload)


class ScriptedExtractor:
    """Stands in for ``ExpenseExtractor``, keyed by the input text."""

    def __init__(self, outputs: dict):
        self.outputs = outputs
        self.calls: list[tuple] = []

    async def extract(self, text, currency, participants=None):
        self.calls.append((text, currency, participants))
        output = self.outputs[text]
        if isinstance(output, Exception):
            raise output
        return parse_extraction(output)


@pytest.fixture
def repo(tmp_path):
    repository = ScenarioRepository(str(tmp_path / "scenarios.json"))
    yield repository
    repository.db.close()


@pytest.fixture
def extraction_failure():
    return ExtractionError("AI parsing failed after 3 tries: No participants extracted")
