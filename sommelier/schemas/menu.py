from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

# Menu documents are stored with camelCase keys. Trees are immutable:
# models are frozen and every sequence is a tuple, so an edit always
# produces a new tree.


class PairingTier(str, Enum):
    BY_GLASS = "byGlass"
    MID_RANGE = "midRange"
    EXCLUSIVE = "exclusive"

    @property
    def label(self) -> str:
        return TIER_LABELS[self]


TIER_LABELS = {
    PairingTier.BY_GLASS: "By the Glass",
    PairingTier.MID_RANGE: "Mid-Range",
    PairingTier.EXCLUSIVE: "Exclusive",
}

WINE_FIELDS = ("name", "grape", "vintage", "price", "note")

# Python attribute holding each tier on Pairings
TIER_ATTRS = {
    PairingTier.BY_GLASS: "by_glass",
    PairingTier.MID_RANGE: "mid_range",
    PairingTier.EXCLUSIVE: "exclusive",
}


class WinePairing(BaseModel):
    """One wine recommendation. Empty strings mean "not set"."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr
    grape: StrictStr
    vintage: StrictStr
    price: StrictStr
    note: StrictStr


class Pairings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    by_glass: WinePairing = Field(..., alias="byGlass")
    mid_range: WinePairing = Field(..., alias="midRange")
    exclusive: WinePairing = Field(..., alias="exclusive")


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    dish: StrictStr
    price: str
    pairings: Pairings

    @field_validator("dish")
    @classmethod
    def validate_dish(cls, v):
        if not v.strip():
            raise ValueError("dish must not be empty")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v):
        # Prices are display text. Numbers from older documents become text,
        # anything else is rejected rather than coerced.
        if isinstance(v, bool):
            raise ValueError("price must be text or a number")
        if isinstance(v, (int, float)):
            return str(v)
        if not isinstance(v, str):
            raise ValueError("price must be text or a number")
        return v


class MenuCategory(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: StrictStr = Field(..., alias="category")
    items: Tuple[MenuItem, ...]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("category name must not be empty")
        return v


Menu = Tuple[MenuCategory, ...]


class RestaurantData(BaseModel):
    """Per-tenant menu document: ``{"menu": [...]}``."""

    model_config = ConfigDict(frozen=True)

    menu: Tuple[MenuCategory, ...]


def empty_wine() -> WinePairing:
    return WinePairing(name="", grape="", vintage="", price="", note="")


def empty_pairings() -> Pairings:
    return Pairings(by_glass=empty_wine(), mid_range=empty_wine(), exclusive=empty_wine())


def empty_item() -> MenuItem:
    """Template for a freshly added dish.

    All three tiers and all five wine fields are present so the pairing
    invariant holds from the start. The blank dish name is a draft state:
    it is built without validation and rejected at commit time until filled.
    """
    return MenuItem.model_construct(dish="", price="", pairings=empty_pairings())
