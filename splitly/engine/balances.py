from splitly.exceptions import DegenerateLedgerError
from splitly.models.schemas import Balance, Expense


def compute_balances(
    participants: list[str], expenses: list[Expense], excluded: list[str] | None = None
) -> list[Balance]:
    """Net position of every participant, in participant order.

    Positive means the group owes that person money. Each expense is split
    equally between every participant not excluded, the payer included unless
    excluded, and the payer is credited the full amount. An expense with no
    one besides its payer to split with is skipped.
    """
    excluded = excluded or []
    balances = {p: 0.0 for p in participants}

    for expense in expenses:
        if expense.payer not in balances:
            raise DegenerateLedgerError(f"Payer '{expense.payer}' is not a participant")

        sharers = [p for p in participants if p not in excluded]
        if not [p for p in sharers if p != expense.payer]:
            continue

        share = expense.amount / len(sharers)
        for sharer in sharers:
            balances[sharer] -= share
        balances[expense.payer] += expense.amount

    return [Balance(name=name, balance=balance) for name, balance in balances.items()]
