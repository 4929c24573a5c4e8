# backend/app/db/models/cart_model.py
"""
Líneas del carrito persistidas en servidor, indexadas por sesión.

Cada fila guarda una copia del producto (nombre, precio, imagen, SKU)
tomada al añadirlo, de modo que un cambio de precio posterior en el
catálogo no altera un carrito existente.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.types import DateTime

from app.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_line_item_id() -> str:
    return uuid.uuid4().hex


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String(32), primary_key=True, default=_new_line_item_id)
    session_id = Column(String(255), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Copia del producto en el momento de añadirlo
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    compare_at_price = Column(Numeric(10, 2), nullable=True)
    image_url = Column(Text, nullable=True)
    sku = Column(String(50), nullable=False)

    # Marca con microsegundos: fija el orden de las líneas dentro del carrito
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint('session_id', 'product_id', name='uq_cart_session_product'),
    )

    def __repr__(self):
        return f"<CartItem(id={self.id}, session_id='{self.session_id}', product_id={self.product_id}, quantity={self.quantity})>"
