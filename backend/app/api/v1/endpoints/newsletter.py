# backend/app/api/v1/endpoints/newsletter.py
"""
Suscripción al boletín de la tienda.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api import deps
from app.crud import subscriber_crud
from app.schemas import subscriber_schema

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/subscribe", response_model=subscriber_schema.SubscriberResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
    *,
    db: AsyncSession = Depends(deps.get_db),
    subscriber_in: subscriber_schema.SubscriberCreate,
) -> subscriber_schema.SubscriberResponse:
    """Da de alta un correo en el boletín. Cada dirección sólo puede suscribirse una vez."""
    if await subscriber_crud.get_subscriber_by_email(db, subscriber_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Este correo ya está suscrito")
    try:
        subscriber = await subscriber_crud.create_subscriber(db, subscriber_in)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Este correo ya está suscrito")
    logger.info(f"📬 BOLETÍN: Nuevo suscriptor id={subscriber.id}")
    return subscriber
