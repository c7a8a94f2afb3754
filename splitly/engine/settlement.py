from splitly.models.schemas import Balance, Settlement

SETTLEMENT_TOLERANCE = 0.01


def reduce_to_settlements(balances: list[Balance]) -> list[Settlement]:
    """Greedy largest-creditor/largest-debtor matching.

    Each round pays off at least one party, so at most ``len(balances) - 1``
    settlements are produced. Parties within ``SETTLEMENT_TOLERANCE`` of zero
    are considered settled. ``balances`` is not modified.
    """
    positives = sorted(
        ([b.name, b.balance] for b in balances if b.balance >= SETTLEMENT_TOLERANCE),
        key=lambda entry: entry[1],
        reverse=True,
    )
    negatives = sorted(
        ([b.name, b.balance] for b in balances if b.balance <= -SETTLEMENT_TOLERANCE),
        key=lambda entry: entry[1],
    )
    settlements: list[Settlement] = []

    while positives and negatives:
        creditor, debtor = positives[0], negatives[0]
        amount = min(creditor[1], -debtor[1])
        settlements.append(Settlement(from_=debtor[0], to=creditor[0], amount=abs(amount)))

        creditor[1] -= amount
        debtor[1] += amount
        if abs(creditor[1]) < SETTLEMENT_TOLERANCE:
            positives.pop(0)
        if abs(debtor[1]) < SETTLEMENT_TOLERANCE:
            negatives.pop(0)

    return settlements


def apply_settlements(balances: list[Balance], settlements: list[Settlement]) -> list[Balance]:
    """Replay settlements: the payer's balance rises, the payee's falls."""
    totals = {b.name: b.balance for b in balances}
    for s in settlements:
        totals[s.from_] += s.amount
        totals[s.to] -= s.amount
    return [Balance(name=name, balance=balance) for name, balance in totals.items()]
