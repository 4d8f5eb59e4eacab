"""
Logique tarifaire pure (pas de Stripe, pas de fichier).
"""
import math
from typing import Any, Mapping, Optional

# module pickup.bookings.pricing
BASE_PRICE_CENTS = 1000  # 10 $
BASE_MILES = 5
PER_MILE_CENTS = 100  # 1 $ par mile entamé

SUPPLY_PRICES = {
    "box": 300,
    "mailer": 100,
    "tape": 50,
    "labelPrint": 50,
}

def _selected(supplies: Any, name: str) -> bool:
    if supplies is None:
        return False
    if isinstance(supplies, Mapping):
        return bool(supplies.get(name))
    # Modèle pydantic: on passe par le dump aliasé (labelPrint)
    if hasattr(supplies, "model_dump"):
        return bool(supplies.model_dump(by_alias=True).get(name))
    return bool(getattr(supplies, name, False))

def supplies_total_cents(supplies: Any) -> int:
    """
    Somme des suppléments fournitures sélectionnés.
    - supplies: modèle Supplies, dict {box, mailer, tape, labelPrint} ou None.
    - Les suppléments s'additionnent sans remise groupée.
    """
    return sum(price for name, price in SUPPLY_PRICES.items() if _selected(supplies, name))

def billable_extra_miles(miles: float) -> int:
    """
    Miles facturables au-delà de la distance incluse, arrondis au mile supérieur.
    - Une distance négative ou NaN est ramenée à 0.
    """
    if miles is None or math.isnan(miles) or miles < 0:
        miles = 0.0
    extra = max(0.0, miles - BASE_MILES)
    return math.ceil(extra)

def calculate_price_cents(miles: float, supplies: Optional[Any] = None) -> int:
    """
    Prix total en centimes: base + miles supplémentaires (plafond) + fournitures.
    Ex: 5.4 miles avec box -> 1000 + 1*100 + 300 = 1400.
    """
    return BASE_PRICE_CENTS + billable_extra_miles(miles) * PER_MILE_CENTS + supplies_total_cents(supplies)
