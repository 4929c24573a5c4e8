# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API. Sigue el patrón de Dependency Injection de FastAPI
para promover código reutilizable y testeable.

Dependencias disponibles:
- get_db: sesión asíncrona de base de datos por petición
- get_settings / get_pricing_policy: configuración y política de precios
- get_session_id: identificador de la sesión de compra (cabecera X-Session-Id)
- require_admin: protege los endpoints del back-office (cabecera X-Admin-Token)
"""

import hmac
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import AsyncSessionLocal
from app.core.config import Settings, settings
from app.services.pricing import PricingPolicy

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session

def get_settings() -> Settings:
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings

def get_pricing_policy(app_settings: Settings = Depends(get_settings)) -> PricingPolicy:
    """
    Política de precios construida desde la configuración.
    """
    return PricingPolicy.from_settings(app_settings)

def get_session_id(
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> str:
    """
    Identificador de la sesión de compra. El carrito de servidor se indexa por él.
    """
    if not x_session_id or not x_session_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Falta la cabecera X-Session-Id")
    session_id = x_session_id.strip()
    if len(session_id) > 255:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-Session-Id demasiado largo")
    return session_id

def require_admin(
    x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
    app_settings: Settings = Depends(get_settings),
) -> None:
    """
    Valida el token de administración. Compara en tiempo constante.
    """
    if not x_admin_token or not hmac.compare_digest(x_admin_token, app_settings.ADMIN_TOKEN):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token de administración inválido")
