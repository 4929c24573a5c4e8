# backend/app/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión con PostgreSQL usando SQLAlchemy y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)

La función get_db() vive en app/api/deps.py para mantener las dependencias
de FastAPI separadas de la configuración.
"""

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from app.core.config import settings # Importamos nuestra configuración

# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Crear un sessionmaker asíncrono
# expire_on_commit=False es importante para que los objetos sigan siendo utilizables
# después de que la transacción se haya confirmado.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()


async def init_db() -> None:
    """
    Crea las tablas que aún no existen.
    Importa los modelos para que queden registrados en Base.metadata.
    """
    from app.db.models import (  # noqa: F401
        blog_model,
        cart_model,
        category_model,
        order_model,
        product_model,
        subscriber_model,
        testimonial_model,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
