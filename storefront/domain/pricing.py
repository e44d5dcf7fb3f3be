# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

TAX_RATE = Decimal("0.10")
FREE_SHIPPING_THRESHOLD = Decimal("50")
STANDARD_SHIPPING = Decimal("5")

ZERO = Decimal("0.00")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def cart_summary(lines: Iterable[tuple]) -> Dict[str, Any]:
    """
    lines: (price, quantity) pairs.

    tax 10%, free shipping above the threshold, otherwise flat rate.
    An empty cart costs nothing, shipping included.
    """
    lines = list(lines)
    subtotal = money(sum((Decimal(str(p)) * q for p, q in lines), ZERO))
    item_count = sum(q for _, q in lines)

    tax = money(subtotal * TAX_RATE)
    if item_count == 0 or subtotal > FREE_SHIPPING_THRESHOLD:
        shipping = ZERO
    else:
        shipping = money(STANDARD_SHIPPING)

    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "total": money(subtotal + tax + shipping),
        "item_count": item_count,
        "free_shipping_threshold": money(FREE_SHIPPING_THRESHOLD),
        "remaining_for_free_shipping": money(max(ZERO, FREE_SHIPPING_THRESHOLD - subtotal)),
    }


def empty_summary() -> Dict[str, Any]:
    return cart_summary([])


# ---------------------------------------------------------------------------
# shipping zones
# ---------------------------------------------------------------------------

def address_in_zone(zone, address: Dict[str, Any]) -> bool:
    country = address.get("country")
    if country not in (zone.countries or []):
        return False

    states = zone.states or []
    if states:
        if not any(s.get("country") == country and s.get("state") == address.get("state") for s in states):
            return False

    postal_codes = zone.postal_codes or []
    if postal_codes:
        return address.get("postal_code") in postal_codes

    return True


def _rate_applies(rate: Dict[str, Any], subtotal: Decimal, weight: Decimal) -> bool:
    kind = rate.get("type")
    if kind == "flat":
        return True
    if kind == "free":
        return rate.get("min_order_amount") is not None and subtotal >= Decimal(str(rate["min_order_amount"]))
    if kind == "weight_based":
        lo, hi = rate.get("min_weight"), rate.get("max_weight")
        if lo is None or hi is None:
            return False
        return Decimal(str(lo)) <= weight <= Decimal(str(hi))
    if kind == "price_based":
        lo, hi = rate.get("min_order_amount"), rate.get("max_order_amount")
        if lo is None or hi is None:
            return False
        return Decimal(str(lo)) <= subtotal <= Decimal(str(hi))
    return False


def _rate_cost(rate: Dict[str, Any], weight: Decimal) -> Decimal:
    if rate.get("type") == "free":
        return ZERO
    cost = Decimal(str(rate.get("cost") or 0))
    if rate.get("type") == "weight_based":
        cost += weight * Decimal(str(rate.get("per_kg_rate") or 0))
    return money(cost)


def cheapest_rate(rates: List[Dict[str, Any]], subtotal, weight) -> Optional[Dict[str, Any]]:
    subtotal = Decimal(str(subtotal or 0))
    weight = Decimal(str(weight or 0))

    best = None
    for rate in rates or []:
        if not _rate_applies(rate, subtotal, weight):
            continue
        cost = _rate_cost(rate, weight)
        if best is None or cost < best["cost"]:
            best = {
                "name": rate.get("name"),
                "cost": cost,
                "estimated_days": rate.get("estimated_days"),
            }
    return best


# ---------------------------------------------------------------------------
# currencies
# ---------------------------------------------------------------------------

def convert_amount(amount, source_rate, target_rate) -> Decimal:
    """Przez walute bazowa: amount / source -> base, base * target."""
    in_base = money(Decimal(str(amount)) / Decimal(str(source_rate)))
    return money(in_base * Decimal(str(target_rate)))
