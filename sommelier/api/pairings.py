from fastapi import APIRouter, Depends, HTTPException

from sommelier.api.menus import load_menu
from sommelier.core.errors import InvariantViolationError
from sommelier.core.pairing import DEFAULT_TIER, dish_options, find_dish, resolve_pairing
from sommelier.db.directory import TenantDirectory, get_directory
from sommelier.schemas.menu import PairingTier
from sommelier.schemas.requests import PairingResponse

router = APIRouter()


@router.get("/tenants/{tenant_id}/dishes")
async def list_dishes(tenant_id: str, directory: TenantDirectory = Depends(get_directory)):
    menu = await load_menu(directory, tenant_id)
    return [option.model_dump() for option in dish_options(menu)]


@router.get("/tenants/{tenant_id}/pairing", response_model=PairingResponse, response_model_by_alias=True)
async def get_pairing(
    tenant_id: str,
    dish: str,
    tier: PairingTier = DEFAULT_TIER,
    directory: TenantDirectory = Depends(get_directory),
):
    """Diner view: the recommended wine for a dish at one price tier."""
    menu = await load_menu(directory, tenant_id)
    item = find_dish(menu, dish)
    if item is None:
        raise HTTPException(status_code=404, detail="Select a dish from the menu.")
    try:
        wine = resolve_pairing(item, tier)
    except InvariantViolationError as e:
        raise HTTPException(status_code=500, detail=e.user_message)

    return PairingResponse(dish=item.dish, tier=tier, tier_label=tier.label, pairing=wine)
