# backend/app/services/pricing.py
"""
Calculadora de precios del carrito.

Función pura que deriva el resumen de precios (subtotal, envío, impuestos
y total) a partir de las líneas del carrito y de la política de precios
configurada. La usan tanto la API (respuesta del carrito y checkout) como
el cliente de la tienda (resumen local tras cada mutación).

Reglas:
- subtotal = Σ(precio congelado × cantidad)
- envío = 0 si subtotal >= umbral, si no la tarifa plana
- impuestos = subtotal × tasa
- total = subtotal + envío + impuestos
- carrito vacío: todo a 0, sin mensaje de "casi envío gratis"
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

from app.core.config import Settings

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Convierte a Decimal redondeado a céntimos (ROUND_HALF_UP)."""
    if not isinstance(value, Decimal):
        # str() evita arrastrar el error binario de los float
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingPolicy:
    """Configuración de precios: umbral de envío gratis, tarifa plana y tasa de impuestos."""
    free_shipping_threshold: Decimal
    flat_shipping_fee: Decimal
    tax_rate: Decimal

    @classmethod
    def from_settings(cls, settings: Settings) -> "PricingPolicy":
        return cls(
            free_shipping_threshold=to_money(settings.FREE_SHIPPING_THRESHOLD),
            flat_shipping_fee=to_money(settings.FLAT_SHIPPING_FEE),
            tax_rate=Decimal(str(settings.TAX_RATE)),
        )


@dataclass(frozen=True)
class PriceSummary:
    subtotal: Decimal
    shipping_fee: Decimal
    tax: Decimal
    total: Decimal
    free_shipping_threshold: Decimal
    amount_to_free_shipping: Decimal

    @property
    def qualifies_for_free_shipping(self) -> bool:
        return self.subtotal > ZERO and self.amount_to_free_shipping == ZERO

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "shipping_fee": self.shipping_fee,
            "tax": self.tax,
            "total": self.total,
            "free_shipping_threshold": self.free_shipping_threshold,
            "amount_to_free_shipping": self.amount_to_free_shipping,
        }


def calculate_summary(lines: Iterable[Tuple[Number, int]], policy: PricingPolicy) -> PriceSummary:
    """
    Calcula el resumen de precios.

    Args:
        lines: pares (precio unitario congelado, cantidad)
        policy: política de precios vigente

    Returns:
        PriceSummary con todos los importes redondeados a céntimos
    """
    subtotal = ZERO
    has_lines = False
    for unit_price, quantity in lines:
        has_lines = True
        subtotal += to_money(unit_price) * quantity
    subtotal = to_money(subtotal)

    if not has_lines or subtotal == ZERO:
        return PriceSummary(
            subtotal=ZERO,
            shipping_fee=ZERO,
            tax=ZERO,
            total=ZERO,
            free_shipping_threshold=policy.free_shipping_threshold,
            amount_to_free_shipping=ZERO,
        )

    if subtotal >= policy.free_shipping_threshold:
        shipping_fee = ZERO
        amount_to_free_shipping = ZERO
    else:
        shipping_fee = to_money(policy.flat_shipping_fee)
        amount_to_free_shipping = to_money(policy.free_shipping_threshold - subtotal)

    tax = to_money(subtotal * policy.tax_rate)
    total = to_money(subtotal + shipping_fee + tax)

    return PriceSummary(
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        tax=tax,
        total=total,
        free_shipping_threshold=policy.free_shipping_threshold,
        amount_to_free_shipping=amount_to_free_shipping,
    )
