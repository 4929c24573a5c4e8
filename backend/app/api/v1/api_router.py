# backend/app/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
"""

from fastapi import APIRouter

# Importación de routers especializados por dominio de negocio
from app.api.v1.endpoints import (
    admin,
    blog,
    cart,
    categories,
    newsletter,
    products,
    search,
    testimonials,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

api_router_v1 = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# CATÁLOGO (lectura pública)
api_router_v1.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router_v1.include_router(products.router, prefix="/products", tags=["Products"])

# CONTENIDO
api_router_v1.include_router(blog.router, prefix="/blog", tags=["Blog"])
api_router_v1.include_router(search.router, prefix="/search", tags=["Search"])
api_router_v1.include_router(testimonials.router, prefix="/testimonials", tags=["Testimonials"])
api_router_v1.include_router(newsletter.router, tags=["Newsletter"])

# CARRITO DE LA SESIÓN (cabecera X-Session-Id)
api_router_v1.include_router(cart.router, prefix="/cart", tags=["Cart"])

# BACK-OFFICE (cabecera X-Admin-Token)
api_router_v1.include_router(admin.router, prefix="/admin", tags=["Admin"])
