from splitly.models.schemas import DailyTotal, Scenario


def daily_totals(scenarios: list[Scenario], category: str | None = None) -> list[DailyTotal]:
    """Total expense amount per scenario date, oldest first.

    The currency reported for a day is that of its first scenario.
    """
    days: dict = {}
    for scenario in scenarios:
        if category and scenario.category != category:
            continue
        day = days.setdefault(
            scenario.date,
            {"total": 0.0, "currency": scenario.currency, "payers": [], "categories": []},
        )
        day["total"] += sum(e.amount for e in scenario.expenses)
        for expense in scenario.expenses:
            if expense.payer not in day["payers"]:
                day["payers"].append(expense.payer)
        if scenario.category not in day["categories"]:
            day["categories"].append(scenario.category)

    return [DailyTotal(date=date, **day) for date, day in sorted(days.items())]
