from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Tuple
import copy

from sommelier.schemas.menu import MenuCategory


class Tenant(BaseModel):
    """Stored tenant record.

    ``menu`` is kept as raw document data here: it comes from an external
    store and is only trusted after it has been through the menu validator.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    access_code: str = Field(..., alias="accessCode")
    theme: Dict[str, Any] = Field(default_factory=dict)
    menu: Any = Field(default_factory=list)
    menu_version: int = Field(0, alias="menuVersion")


class TenantSnapshot(BaseModel):
    """Immutable result of a successful login.

    The theme is free-form JSON, so it is copied in and handed out as a copy
    through ``theme``; callers cannot change a snapshot through it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tenant_id: str = Field(..., alias="tenantId")
    display_name: str = Field(..., alias="displayName")
    theme_data: Dict[str, Any] = Field(default_factory=dict, alias="theme")
    menu: Tuple[MenuCategory, ...]
    menu_version: int = Field(0, alias="menuVersion")

    @field_validator("theme_data")
    @classmethod
    def copy_theme(cls, v):
        return copy.deepcopy(v)

    @property
    def theme(self) -> Dict[str, Any]:
        return copy.deepcopy(self.theme_data)
