"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación: logging, registro de
routers de la API con su prefijo, documentación automática y eventos del
ciclo de vida (creación de tablas al arrancar).
"""

import logging

from fastapi import FastAPI
from app.core.config import settings  # Configuración centralizada de la aplicación
from app.api.v1.api_router import api_router_v1  # Router principal de la API v1
from app.db.database import init_db

# ========================================
# LOGGING
# ========================================

logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de la tienda de plantas y jardinería: catálogo, blog y carrito de la compra"
)

# ========================================
# REGISTRO DE ROUTERS DE LA API
# ========================================

app.include_router(api_router_v1, prefix=settings.API_V1_STR)


# ========================================
# ENDPOINTS RAÍZ Y VERIFICACIÓN DE ESTADO
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Example:
        GET /
        Response: {"message": "Bienvenido a Huerta API v0.1.0"}
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}"}

# ========================================
# EVENTOS DEL CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@app.on_event("startup")
async def startup_event():
    """
    Crea las tablas que falten antes de atender peticiones.
    Un fallo aquí detiene el arranque: sin base de datos no hay tienda.
    """
    await init_db()
    logger.info(f"✅ {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} lista")
