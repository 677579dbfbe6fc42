from pydantic import BaseModel, ConfigDict, Field
from typing import Tuple

from sommelier.schemas.menu import MenuItem


class FilteredItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    original_index: int = Field(..., alias="originalIndex")
    item: MenuItem


class FilteredCategory(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    original_index: int = Field(..., alias="originalIndex")
    items: Tuple[FilteredItem, ...]
