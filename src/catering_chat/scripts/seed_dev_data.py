"""Seed development data: one vendor, one customer lead and a short conversation."""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from catering_chat.application.dto.principal import Principal
from catering_chat.application.dto.quote import CreateQuoteDTO
from catering_chat.infrastructure.db.base import Base
from catering_chat.infrastructure.db.models import LeadModel, VendorLeadModel, VendorModel
from catering_chat.infrastructure.db.session import AsyncSessionLocal, engine
from catering_chat.infrastructure.db.uow import SqlAlchemyUoW
from catering_chat.services import message_service, quote_service

logger = logging.getLogger(__name__)

VENDOR_OWNER_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")
CUSTOMER_ID = uuid.UUID("00000000-0000-4000-8000-000000000002")


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    vendor_id, lead_id, vendor_lead_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    async with AsyncSessionLocal() as session:
        session.add(VendorModel(
            id=vendor_id, owner_id=VENDOR_OWNER_ID,
            business_name="Lezzet Catering", logo_url=None,
        ))
        session.add(LeadModel(
            id=lead_id, customer_profile_id=CUSTOMER_ID,
            customer_name="Ayşe Yılmaz", event_date=date.today() + timedelta(days=30),
        ))
        await session.flush()
        session.add(VendorLeadModel(id=vendor_lead_id, vendor_id=vendor_id, lead_id=lead_id, status="new"))
        await session.commit()

    vendor = Principal(user_id=VENDOR_OWNER_ID)
    customer = Principal(user_id=CUSTOMER_ID)
    conversation = [
        (customer, "Merhaba, 120 kişilik düğün için fiyat alabilir miyim?"),
        (vendor, "Merhaba! Tabii, menü tercihlerinizi paylaşır mısınız?"),
        (customer, "Akşam yemeği, et ağırlıklı olsun."),
    ]
    for principal, content in conversation:
        async with AsyncSessionLocal() as session:
            await message_service.send_message(vendor_lead_id, principal, content, SqlAlchemyUoW(session))

    async with AsyncSessionLocal() as session:
        await quote_service.create_quote(
            CreateQuoteDTO(
                vendor_lead_id=vendor_lead_id,
                total_price=Decimal("54000"),
                price_per_person=Decimal("450"),
                message="Menü: çorba, ana yemek, tatlı ve içecekler dahil.",
                valid_until=datetime.now(timezone.utc) + timedelta(days=7),
            ),
            vendor,
            SqlAlchemyUoW(session),
        )

    logger.info("Seeded vendor lead %s with %d messages and a quote", vendor_lead_id, len(conversation))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
