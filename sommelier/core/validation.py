from pydantic import BaseModel, TypeAdapter, ValidationError
from typing import Any, Dict, List
import logging

from sommelier.core.errors import MenuValidationError
from sommelier.schemas.menu import Menu, RestaurantData
from sommelier.schemas.violation import Violation

logger = logging.getLogger(__name__)

_menu_adapter = TypeAdapter(Menu)


def _plain(value: Any) -> Any:
    # Model instances are dumped back to raw data so that drafts built
    # without validation cannot slip through as already-trusted objects.
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _violations(error: ValidationError, prefix: str = "") -> List[Violation]:
    violations = []
    for issue in error.errors():
        parts = [prefix] if prefix else []
        parts.extend(str(p) for p in issue["loc"])
        violations.append(Violation(
            loc=".".join(parts) or "menu",
            message=issue["msg"],
            type=issue["type"],
        ))
    return violations


def validate_menu(candidate: Any) -> Menu:
    """
    Validate a candidate menu tree (a sequence of categories).
    Returns the normalized, immutable tree or raises MenuValidationError
    listing every violation found, not just the first one.
    """
    plain = _plain(candidate)
    if not isinstance(plain, list):
        violation = Violation(loc="menu", message="Input should be a sequence of categories", type="sequence_type")
        raise MenuValidationError([violation])

    try:
        return _menu_adapter.validate_python(plain)
    except ValidationError as e:
        violations = _violations(e, prefix="menu")
        logger.info(f"Menu rejected with {len(violations)} violation(s)")
        raise MenuValidationError(violations) from e


def validate_restaurant_data(candidate: Any) -> RestaurantData:
    """Same as validate_menu, for a whole ``{"menu": [...]}`` document."""
    try:
        return RestaurantData.model_validate(_plain(candidate))
    except ValidationError as e:
        violations = _violations(e)
        logger.info(f"Menu document rejected with {len(violations)} violation(s)")
        raise MenuValidationError(violations) from e


def menu_to_document(menu: Menu) -> List[Dict[str, Any]]:
    """Dump a tree to JSON-ready data using the stored key names."""
    return [category.model_dump(by_alias=True, mode="json") for category in menu]
