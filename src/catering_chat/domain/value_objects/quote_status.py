"""Quote lifecycle rules shared by the services and the client quote card."""
from __future__ import annotations

from datetime import datetime

from catering_chat.domain.value_objects.enums import QuoteStatus

QUOTE_STATUS_TRANSITIONS: dict[QuoteStatus, frozenset[QuoteStatus]] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.SENT, QuoteStatus.CANCELLED}),
    QuoteStatus.SENT: frozenset({
        QuoteStatus.VIEWED,
        QuoteStatus.ACCEPTED,
        QuoteStatus.REJECTED,
        QuoteStatus.EXPIRED,
        QuoteStatus.CANCELLED,
        QuoteStatus.COUNTER_OFFERED,
    }),
    QuoteStatus.VIEWED: frozenset({
        QuoteStatus.ACCEPTED,
        QuoteStatus.REJECTED,
        QuoteStatus.EXPIRED,
        QuoteStatus.CANCELLED,
        QuoteStatus.COUNTER_OFFERED,
    }),
    QuoteStatus.ACCEPTED: frozenset(),
    QuoteStatus.REJECTED: frozenset(),
    QuoteStatus.EXPIRED: frozenset(),
    QuoteStatus.CANCELLED: frozenset(),
    QuoteStatus.COUNTER_OFFERED: frozenset(),
}

# Statuses in which the customer may still accept or reject.
ACTIONABLE_STATUSES: frozenset[QuoteStatus] = frozenset({QuoteStatus.SENT, QuoteStatus.VIEWED})

COUNTER_OFFERABLE_STATUSES: frozenset[QuoteStatus] = frozenset({
    QuoteStatus.SENT,
    QuoteStatus.VIEWED,
    QuoteStatus.COUNTER_OFFERED,
})


def can_transition(current: str, target: str) -> bool:
    try:
        return QuoteStatus(target) in QUOTE_STATUS_TRANSITIONS[QuoteStatus(current)]
    except ValueError:
        return False


def is_expired(valid_until: datetime | None, now: datetime) -> bool:
    """True once the deadline has passed, whatever the stored status says."""
    return valid_until is not None and valid_until < now
