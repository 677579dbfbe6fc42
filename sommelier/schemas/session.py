from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone

from sommelier.schemas.menu import RestaurantData


class SessionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(..., alias="tenantId")
    display_name: str = Field(..., alias="restaurantName")
    menu_data: RestaurantData = Field(..., alias="menuData")
    menu_version: int = Field(0, alias="menuVersion")
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="savedAt")
