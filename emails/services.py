import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from core.config import settings
from emails.models import Email

logger = logging.getLogger("emails.services")


async def insert_email(
    db: AsyncSession,
    sender: str,
    recipient: str,
    subject: str,
    text_body: str,
    html_body: str,
    received_at: str,
) -> Email:
    e = Email(
        sender=sender,
        recipient=recipient,
        subject=subject,
        body=text_body,
        html_body=html_body,
        received_at=received_at,
    )
    db.add(e)
    await db.commit()
    await db.refresh(e)
    logger.debug("Inserted email id=%s from=%s", e.id, sender)
    return e


async def select_recent(db: AsyncSession, limit: Optional[int] = None) -> List[Email]:
    result = await db.execute(
        select(Email)
        .order_by(Email.received_at.desc(), Email.id.desc())
        .limit(limit if limit is not None else settings.EMAIL_LIST_LIMIT)
    )
    return list(result.scalars().all())
