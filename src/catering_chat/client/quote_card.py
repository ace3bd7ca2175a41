from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from catering_chat.client.models import QuoteSnapshot
from catering_chat.domain.value_objects.enums import QuoteStatus, SenderType
from catering_chat.domain.value_objects.quote_status import ACTIONABLE_STATUSES, is_expired
from catering_chat.formatting import format_date_long, format_price

STATUS_LABELS = {
    QuoteStatus.DRAFT: "Taslak",
    QuoteStatus.SENT: "Gönderildi",
    QuoteStatus.VIEWED: "Görüldü",
    QuoteStatus.ACCEPTED: "Kabul Edildi",
    QuoteStatus.REJECTED: "Reddedildi",
    QuoteStatus.EXPIRED: "Süresi Doldu",
    QuoteStatus.CANCELLED: "İptal Edildi",
    QuoteStatus.COUNTER_OFFERED: "Karşı Teklif Verildi",
}

EXPIRED_HINT = "Bu teklifin süresi dolmuş. Firma ile iletişime geçin."


@dataclass(frozen=True, slots=True)
class QuoteCardView:
    quote_id: str
    price_label: str
    per_person_label: str | None
    message: str | None
    validity_label: str | None
    status: str
    status_label: str
    can_act: bool
    expired_hint: str | None

    @classmethod
    def build(
        cls,
        quote: QuoteSnapshot,
        *,
        viewer_role: SenderType | str,
        is_own: bool,
        now: datetime,
    ) -> QuoteCardView:
        expired = is_expired(quote.valid_until, now)
        actionable = quote.status in ACTIONABLE_STATUSES
        is_customer = viewer_role == SenderType.CUSTOMER

        validity = None
        if quote.valid_until is not None:
            prefix = "⚠️ Süre doldu: " if expired else "Geçerlilik: "
            validity = prefix + format_date_long(quote.valid_until)

        try:
            status_label = STATUS_LABELS[QuoteStatus(quote.status)]
        except ValueError:
            status_label = quote.status

        return cls(
            quote_id=quote.id,
            price_label=format_price(quote.total_price),
            per_person_label=(
                f"Kişi başı: {format_price(quote.price_per_person)}"
                if quote.price_per_person is not None
                else None
            ),
            message=quote.message,
            validity_label=validity,
            status=quote.status,
            status_label=status_label,
            can_act=is_customer and not is_own and actionable and not expired,
            expired_hint=EXPIRED_HINT if is_customer and actionable and expired else None,
        )
