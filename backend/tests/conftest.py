"""Configuración de pytest y fixtures compartidas"""
import os
from decimal import Decimal

# Variables de entorno de prueba (antes de importar la aplicación)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api import deps
from app.db.database import Base
from app.db.models import (  # noqa: F401
    blog_model, cart_model, category_model, order_model, product_model, subscriber_model, testimonial_model,
)
from app.db.models.blog_model import BlogPost
from app.db.models.category_model import Category
from app.db.models.product_model import Product
from app.db.models.testimonial_model import Testimonial
from app.main import app
from app.services.pricing import PricingPolicy

ADMIN_TOKEN = os.environ["ADMIN_TOKEN"]
SESSION_ID = "sess-test-1"


@pytest.fixture
def policy():
    """Política canónica: envío gratis desde 50.00, tarifa 5.99, impuestos 7 %"""
    return PricingPolicy(
        free_shipping_threshold=Decimal("50.00"),
        flat_shipping_fee=Decimal("5.99"),
        tax_rate=Decimal("0.07"),
    )


@pytest_asyncio.fixture
async def session_factory():
    """Base de datos SQLite en memoria compartida por todas las sesiones del test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db):
    """Catálogo de ejemplo: dos categorías, cuatro productos, dos artículos del blog y dos opiniones"""
    interior = Category(id=1, name="Plantas de interior", slug="plantas-interior", description="Para casa")
    macetas = Category(id=2, name="Macetas", slug="macetas")
    db.add_all([interior, macetas])

    db.add_all([
        Product(
            id=42, category_id=1, name="Monstera Deliciosa", slug="monstera-deliciosa",
            description="Planta tropical de hojas grandes", price=Decimal("10.00"),
            compare_at_price=Decimal("14.00"), sku="MON-001", stock=10, featured=True,
        ),
        Product(
            id=43, category_id=1, name="Pothos Dorado", slug="pothos-dorado",
            description="Trepadora resistente", price=Decimal("25.00"), sku="POT-001", stock=3,
        ),
        Product(
            id=44, category_id=2, name="Maceta de Barro", slug="maceta-barro",
            description="Barro cocido 20 cm", price=Decimal("7.50"), sku="MAC-020", stock=0,
        ),
        Product(
            id=45, category_id=2, name="Maceta Autorriego", slug="maceta-autorriego",
            description="Con depósito de agua", price=Decimal("19.99"), sku="MAC-AUTO", stock=20,
        ),
    ])

    db.add_all([
        BlogPost(
            id=1, title="Cómo regar la Monstera", slug="regar-monstera",
            content="Riega cuando los dos primeros centímetros de sustrato estén secos.",
            excerpt="Guía de riego", author="Lucía", published=True, category_id=1,
        ),
        BlogPost(
            id=2, title="Borrador sobre esquejes", slug="borrador-esquejes",
            content="Pendiente de revisar.", author="Lucía", published=False, category_id=1,
        ),
    ])

    db.add_all([
        Testimonial(
            id=1, content="Mi Monstera llegó perfecta y bien embalada.", rating=5,
            customer_name="Marta G.", customer_title="Cliente desde 2023", approved=True,
        ),
        Testimonial(
            id=2, content="Tardó un poco en llegar.", rating=3, customer_name="Jorge P.", approved=False,
        ),
    ])
    await db.commit()
    return db


@pytest_asyncio.fixture
async def client(session_factory, seeded):
    """Cliente HTTP contra la aplicación FastAPI usando la base de datos de prueba"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[deps.get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_headers():
    return {"X-Session-Id": SESSION_ID}


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}
