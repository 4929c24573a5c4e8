# backend/app/db/models/testimonial_model.py
"""
Opiniones de clientes. Sólo las aprobadas desde el back-office se publican.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean
from sqlalchemy.sql import func
from sqlalchemy.types import DateTime

from app.db.database import Base

class Testimonial(Base):
    __tablename__ = "testimonials"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_title = Column(String(255), nullable=True)
    customer_image = Column(Text, nullable=True)
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Testimonial(id={self.id}, rating={self.rating}, approved={self.approved})>"
