from pydantic import BaseModel
from typing import List, Optional, Union
import logging

from sommelier.core.errors import InvariantViolationError
from sommelier.schemas.menu import TIER_ATTRS, Menu, MenuItem, PairingTier, WinePairing

logger = logging.getLogger(__name__)

# A fresh dish selection always starts on the cheapest tier
DEFAULT_TIER = PairingTier.BY_GLASS


class DishOption(BaseModel):
    category: str
    dish: str
    label: str


def resolve_pairing(item: MenuItem, tier: Union[PairingTier, str] = DEFAULT_TIER) -> WinePairing:
    """
    Return the wine for one tier of a dish.
    Every validated item carries all three tiers, so a miss here means
    something skipped validation upstream.
    """
    tier = PairingTier(tier)
    pairings = getattr(item, "pairings", None)
    wine = getattr(pairings, TIER_ATTRS[tier], None)
    if not isinstance(wine, WinePairing):
        logger.error(f"Pairing tier {tier.value} missing on dish {getattr(item, 'dish', '?')!r}")
        raise InvariantViolationError(f"Pairing tier '{tier.value}' is missing")
    return wine


def find_dish(menu: Menu, dish: str) -> Optional[MenuItem]:
    """First item with this exact dish name, scanning categories in order."""
    for category in menu:
        for item in category.items:
            if item.dish == dish:
                return item
    return None


def dish_options(menu: Menu) -> List[DishOption]:
    return [
        DishOption(category=category.name, dish=item.dish, label=f"{item.dish} — {item.price} NOK")
        for category in menu
        for item in category.items
    ]


def recommend(menu: Menu, dish: str, tier: Union[PairingTier, str] = DEFAULT_TIER) -> Optional[WinePairing]:
    item = find_dish(menu, dish)
    if item is None:
        return None
    return resolve_pairing(item, tier)
