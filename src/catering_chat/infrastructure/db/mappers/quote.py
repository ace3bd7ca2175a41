from __future__ import annotations

from catering_chat.domain.entities.quote import Quote
from catering_chat.infrastructure.db.models.quote import QuoteModel

_FIELDS = (
    "id",
    "vendor_lead_id",
    "total_price",
    "price_per_person",
    "message",
    "valid_until",
    "status",
    "created_at",
    "sent_at",
    "accepted_at",
    "rejected_at",
    "parent_quote_id",
    "is_counter_offer",
    "counter_offer_by",
    "counter_offer_note",
)


def model_to_entity(model: QuoteModel) -> Quote:
    return Quote(**{name: getattr(model, name) for name in _FIELDS})


def entity_to_model(entity: Quote) -> QuoteModel:
    return QuoteModel(**{name: getattr(entity, name) for name in _FIELDS})

