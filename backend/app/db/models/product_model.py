# backend/app/db/models/product_model.py
from sqlalchemy import Column, Integer, String, ForeignKey, Text, Numeric, Boolean, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from app.db.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    compare_at_price = Column(Numeric(10, 2), nullable=True)
    image_url = Column(Text, nullable=True)
    sku = Column(String(50), nullable=False, unique=True, index=True)
    stock = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    category = relationship("Category", back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', stock={self.stock})>"

    def to_snapshot(self) -> dict:
        """Datos desnormalizados que el carrito congela al añadir el producto."""
        return {
            "name": self.name,
            "price": self.price,
            "compare_at_price": self.compare_at_price,
            "image_url": self.image_url,
            "sku": self.sku,
        }
