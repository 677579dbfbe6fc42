from typing import Tuple

from sommelier.core.errors import IndexOutOfRangeError
from sommelier.schemas.menu import Menu, MenuItem
from sommelier.schemas.search import FilteredCategory, FilteredItem

# Wine fields that take part in search. Tasting notes are not searched.
SEARCHABLE_WINE_FIELDS = ("name", "grape", "vintage")


def item_matches(item: MenuItem, query: str) -> bool:
    if not query:
        return True
    needle = query.casefold()
    if needle in item.dish.casefold() or needle in str(item.price).casefold():
        return True
    for wine in (item.pairings.by_glass, item.pairings.mid_range, item.pairings.exclusive):
        for field in SEARCHABLE_WINE_FIELDS:
            if needle in getattr(wine, field).casefold():
                return True
    return False


def filter_menu(menu: Menu, query: str) -> Tuple[FilteredCategory, ...]:
    """
    Display-only view of the menu for a free-text query.
    Each category and item keeps its index in the unfiltered tree so edits
    made from the filtered view can be routed back to the editor.
    Categories with no matching item are left out.
    """
    view = []
    for category_index, category in enumerate(menu):
        items = tuple(
            FilteredItem(original_index=item_index, item=item)
            for item_index, item in enumerate(category.items)
            if item_matches(item, query)
        )
        if items:
            view.append(FilteredCategory(name=category.name, original_index=category_index, items=items))
    return tuple(view)


def resolve_original(menu: Menu, category_index: int, item_index: int) -> MenuItem:
    if not 0 <= category_index < len(menu):
        raise IndexOutOfRangeError(f"Category {category_index} does not exist")
    items = menu[category_index].items
    if not 0 <= item_index < len(items):
        raise IndexOutOfRangeError(f"Item {item_index} does not exist in category {category_index}")
    return items[item_index]
