"""Tests for the TinyDB scenario store and daily totals."""

import datetime as dt

import pytest

from splitly.db.repository import ScenarioRepository
from splitly.exceptions import PersistenceError
from splitly.models.schemas import Balance, Expense, Scenario, Settlement
from splitly.services.analytics import daily_totals


def _scenario(user_id="user-1", day=1, category="Food", expenses=None):
    return Scenario(
        user_id=user_id,
        category=category,
        currency="USD",
        input="j paid 200 for food with ab",
        participants=["j", "ab"],
        expenses=expenses or [Expense(payer="j", amount=200, description="food")],
        balances=[Balance(name="j", balance=100), Balance(name="ab", balance=-100)],
        settlements=[Settlement(from_="ab", to="j", amount=100)],
        date=dt.date(2024, 3, day),
    )


def test_add_assigns_id_and_round_trips(repo):
    saved = repo.add(_scenario())

    assert saved.id is not None
    loaded = repo.get(saved.id, "user-1")
    assert loaded == saved
    assert loaded.settlements[0].from_ == "ab"


def test_stored_document_uses_wire_names(repo):
    saved = repo.add(_scenario())

    doc = repo.table.get(doc_id=saved.id)

    assert doc["settlements"] == [{"from": "ab", "to": "j", "amount": 100.0}]
    assert doc["date"] == "2024-03-01"


def test_get_other_users_scenario_is_none(repo):
    saved = repo.add(_scenario())

    assert repo.get(saved.id, "user-2") is None
    assert repo.get(999, "user-1") is None


def test_list_sorted_by_date_descending(repo):
    for day in (3, 1, 2):
        repo.add(_scenario(day=day))
    repo.add(_scenario(user_id="user-2", day=9))

    scenarios = repo.list_for_user("user-1")

    assert [s.date.day for s in scenarios] == [3, 2, 1]


def test_list_by_category(repo):
    repo.add(_scenario(category="Food"))
    repo.add(_scenario(category="Travel"))

    assert [s.category for s in repo.list_for_user("user-1", category="Travel")] == ["Travel"]


def test_delete_is_owner_scoped(repo):
    saved = repo.add(_scenario())

    assert repo.delete(saved.id, "user-2") is False
    assert repo.delete(saved.id, "user-1") is True
    assert repo.list_for_user("user-1") == []
    assert repo.delete(saved.id, "user-1") is False


def test_unreadable_store_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(PersistenceError):
        ScenarioRepository(str(path)).add(_scenario())


def test_daily_totals():
    scenarios = [
        _scenario(day=2, category="Travel", expenses=[Expense(payer="ab", amount=50, description="cab")]),
        _scenario(day=1),
        _scenario(
            day=2,
            expenses=[
                Expense(payer="j", amount=10, description="tea"),
                Expense(payer="cha", amount=5, description="snacks"),
            ],
        ),
    ]

    totals = daily_totals(scenarios)

    assert [t.date.day for t in totals] == [1, 2]
    assert totals[0].total == 200
    assert totals[1].total == 65
    assert totals[1].payers == ["ab", "j", "cha"]
    assert totals[1].categories == ["Travel", "Food"]

    food_only = daily_totals(scenarios, category="Food")
    assert [t.total for t in food_only] == [200, 15]
