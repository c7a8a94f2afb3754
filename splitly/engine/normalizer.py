from typing import NamedTuple

from splitly.models.schemas import ParsedResult


class NormalizedLedger(NamedTuple):
    participants: list[str]
    excluded: list[str]
    sharers: list[str]


def _clean(names: list[str]) -> list[str]:
    cleaned: list[str] = []
    for name in names:
        name = name.strip().lower()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def normalize(parsed: ParsedResult, body_excluded: list[str] | None = None) -> NormalizedLedger:
    """Reconcile extracted names and exclusions into one scenario ledger.

    Exclusions named by the extraction win; the caller's own exclusions are
    only used when the extraction found none. Payers are always kept as
    participants, even when excluded, so whoever fronted money is reimbursed.
    ``sharers`` is empty when nobody is left to split with.
    """
    excluded = _clean(parsed.excluded) or _clean(body_excluded or [])
    payers = _clean([e.payer for e in parsed.expenses])

    participants = _clean(
        payers[:1]
        + [p for p in parsed.participants if p.strip().lower() not in excluded]
        + payers[1:]
    )
    sharers = [p for p in participants if p not in excluded]

    return NormalizedLedger(participants, excluded, sharers)
