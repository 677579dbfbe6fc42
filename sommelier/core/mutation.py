from typing import Any, Dict, Optional, Union
import asyncio
import logging

from sommelier.core.config import settings
from sommelier.core.errors import IndexOutOfRangeError, PersistenceError, StaleMenuError
from sommelier.core.validation import menu_to_document, validate_menu
from sommelier.db.directory import TenantDirectory
from sommelier.schemas.menu import (
    WINE_FIELDS,
    Menu,
    MenuItem,
    Pairings,
    PairingTier,
    TIER_ATTRS,
    empty_item,
)
from sommelier.schemas.tenant import TenantSnapshot

logger = logging.getLogger(__name__)

# Fields a patch may touch on a single dish
ITEM_FIELDS = ("dish", "price", "pairings")


# Each edit below returns a new tree. Only the path from the root to the
# edited item is copied; untouched categories and items are shared.

def _check_indices(menu: Menu, category_index: int, item_index: Optional[int] = None) -> None:
    if not 0 <= category_index < len(menu):
        raise IndexOutOfRangeError(f"Category {category_index} does not exist")
    if item_index is not None and not 0 <= item_index < len(menu[category_index].items):
        raise IndexOutOfRangeError(f"Item {item_index} does not exist in category {category_index}")


def _replace_items(menu: Menu, category_index: int, items) -> Menu:
    category = menu[category_index].model_copy(update={"items": tuple(items)})
    return tuple(menu[:category_index]) + (category,) + tuple(menu[category_index + 1:])


def update_item(menu: Menu, category_index: int, item_index: int, patch: Dict[str, Any]) -> Menu:
    _check_indices(menu, category_index, item_index)
    unknown = set(patch) - set(ITEM_FIELDS)
    if unknown:
        raise ValueError(f"Unknown dish field(s): {', '.join(sorted(unknown))}")
    if "pairings" in patch and not isinstance(patch["pairings"], Pairings):
        raise TypeError("pairings must be a complete Pairings value")
    for key in ("dish", "price"):
        if key in patch and not isinstance(patch[key], str):
            raise TypeError(f"{key} must be text")

    items = list(menu[category_index].items)
    items[item_index] = items[item_index].model_copy(update=patch)
    return _replace_items(menu, category_index, items)


def update_pairing(menu: Menu, category_index: int, item_index: int,
                   tier: Union[PairingTier, str], field: str, value: str) -> Menu:
    _check_indices(menu, category_index, item_index)
    if field not in WINE_FIELDS:
        raise ValueError(f"Unknown wine field: {field}")
    if not isinstance(value, str):
        raise TypeError(f"{field} must be text")
    attr = TIER_ATTRS[PairingTier(tier)]

    item = menu[category_index].items[item_index]
    wine = getattr(item.pairings, attr).model_copy(update={field: value})
    pairings = item.pairings.model_copy(update={attr: wine})
    return update_item(menu, category_index, item_index, {"pairings": pairings})


def append_item(menu: Menu, category_index: int) -> Menu:
    _check_indices(menu, category_index)
    return _replace_items(menu, category_index, menu[category_index].items + (empty_item(),))


def remove_item(menu: Menu, category_index: int, item_index: int) -> Menu:
    """Drop one dish. The caller is responsible for having asked the user first."""
    _check_indices(menu, category_index, item_index)
    items = menu[category_index].items
    return _replace_items(menu, category_index, items[:item_index] + items[item_index + 1:])


async def commit_menu(directory: TenantDirectory, tenant_id: str, menu: Any,
                      expected_version: Optional[int] = None) -> int:
    """
    Validate a working tree and store it as the tenant's whole menu.

    Validation failures raise MenuValidationError before storage is touched.
    A version mismatch raises StaleMenuError. Any other storage failure is
    logged and reported as a generic PersistenceError.
    Returns the new menu version.
    """
    validated = validate_menu(menu)
    document = menu_to_document(validated)

    try:
        version = await asyncio.wait_for(
            directory.replace_menu(tenant_id, document, expected_version=expected_version),
            timeout=settings.COMMIT_TIMEOUT_SECONDS,
        )
    except StaleMenuError:
        logger.warning(f"Stale menu commit rejected for tenant {tenant_id}")
        raise
    except Exception as e:
        logger.exception(f"Menu commit failed for tenant {tenant_id}: {e!r}")
        raise PersistenceError() from None

    logger.info(f"Menu committed for tenant {tenant_id}, version {version}")
    return version


class MenuEditor:
    """Working copy of one tenant's menu for an admin editing session."""

    def __init__(self, tenant_id: str, menu: Menu, version: Optional[int] = None):
        self.tenant_id = tenant_id
        self.menu: Menu = tuple(menu)
        self.version = version

    @classmethod
    def from_snapshot(cls, snapshot: TenantSnapshot) -> "MenuEditor":
        return cls(snapshot.tenant_id, snapshot.menu, snapshot.menu_version)

    def set_item_field(self, category_index: int, item_index: int, patch: Dict[str, Any]) -> Menu:
        self.menu = update_item(self.menu, category_index, item_index, patch)
        return self.menu

    def set_pairing_field(self, category_index: int, item_index: int,
                          tier: Union[PairingTier, str], field: str, value: str) -> Menu:
        self.menu = update_pairing(self.menu, category_index, item_index, tier, field, value)
        return self.menu

    def add_item(self, category_index: int) -> Menu:
        self.menu = append_item(self.menu, category_index)
        return self.menu

    def remove_item(self, category_index: int, item_index: int) -> Menu:
        self.menu = remove_item(self.menu, category_index, item_index)
        return self.menu

    def item(self, category_index: int, item_index: int) -> MenuItem:
        _check_indices(self.menu, category_index, item_index)
        return self.menu[category_index].items[item_index]

    async def commit(self, directory: TenantDirectory) -> int:
        self.version = await commit_menu(directory, self.tenant_id, self.menu, expected_version=self.version)
        return self.version
