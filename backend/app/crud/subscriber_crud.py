# backend/app/crud/subscriber_crud.py
"""
Operaciones CRUD para los suscriptores del boletín.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.subscriber_model import Subscriber
from app.schemas import subscriber_schema


async def get_subscriber_by_email(db: AsyncSession, email: str) -> Optional[Subscriber]:
    result = await db.execute(select(Subscriber).filter(Subscriber.email == email))
    return result.scalars().first()


async def create_subscriber(db: AsyncSession, subscriber: subscriber_schema.SubscriberCreate) -> Subscriber:
    db_subscriber = Subscriber(email=subscriber.email)
    db.add(db_subscriber)
    await db.commit()
    await db.refresh(db_subscriber)
    return db_subscriber
