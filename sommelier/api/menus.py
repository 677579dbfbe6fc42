from fastapi import APIRouter, Body, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from sommelier.core.auth import resolve_tenant_id
from sommelier.core.errors import (
    EmptyInputError,
    InvalidCredentialsError,
    MenuValidationError,
    PersistenceError,
    StaleMenuError,
)
from sommelier.core.mutation import commit_menu
from sommelier.core.search import filter_menu
from sommelier.core.validation import menu_to_document, validate_menu
from sommelier.db.directory import TenantDirectory, get_directory
from sommelier.schemas.menu import Menu
from sommelier.schemas.requests import CommitResponse, MenuCommitRequest, ValidationErrorResponse
from sommelier.schemas.tenant import Tenant

router = APIRouter()
logger = logging.getLogger(__name__)


async def load_tenant(directory: TenantDirectory, tenant_id: str) -> Tenant:
    """Helper shared by the menu and pairing endpoints."""
    try:
        tenant = await directory.get_by_id(tenant_id)
    except Exception as e:
        logger.exception(f"Tenant fetch failed for {tenant_id}: {e!r}")
        raise HTTPException(status_code=503, detail="Menu is unavailable.")
    if tenant is None:
        raise HTTPException(status_code=404, detail="Unknown restaurant.")
    return tenant


def tenant_menu(tenant: Tenant) -> Menu:
    try:
        return validate_menu(tenant.menu)
    except MenuValidationError as e:
        logger.error(f"Stored menu for tenant {tenant.id} is invalid: {e}")
        raise HTTPException(status_code=503, detail="Menu is unavailable.")


async def load_menu(directory: TenantDirectory, tenant_id: str) -> Menu:
    return tenant_menu(await load_tenant(directory, tenant_id))


@router.get("/tenants/{tenant_id}/menu")
async def get_menu(tenant_id: str, directory: TenantDirectory = Depends(get_directory)):
    tenant = await load_tenant(directory, tenant_id)
    menu = tenant_menu(tenant)
    return {
        "tenantId": tenant.id,
        "restaurantName": tenant.name,
        "menu": menu_to_document(menu),
        "menuVersion": tenant.menu_version,
    }


@router.put("/tenants/{tenant_id}/menu", response_model=CommitResponse, response_model_by_alias=True)
async def save_menu(
    tenant_id: str,
    request: MenuCommitRequest = Body(...),
    x_access_code: Optional[str] = Header(None, alias="X-Access-Code"),
    directory: TenantDirectory = Depends(get_directory),
):
    """
    Replace the tenant's whole menu. The access code header must belong to
    the tenant being edited.
    """
    try:
        owner_id = await resolve_tenant_id(directory, x_access_code or "")
    except (EmptyInputError, InvalidCredentialsError) as e:
        raise HTTPException(status_code=401, detail=e.user_message)
    if owner_id != tenant_id:
        logger.warning(f"Access code for {owner_id} used against tenant {tenant_id}")
        raise HTTPException(status_code=401, detail=InvalidCredentialsError.user_message)

    try:
        version = await commit_menu(directory, tenant_id, request.menu, expected_version=request.expected_version)
    except MenuValidationError as e:
        body = ValidationErrorResponse(detail=e.user_message, violations=e.violations)
        return JSONResponse(status_code=422, content=body.model_dump())
    except StaleMenuError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=e.user_message)

    return CommitResponse(menu_version=version)


@router.get("/tenants/{tenant_id}/menu/search")
async def search_menu(tenant_id: str, q: str = "", directory: TenantDirectory = Depends(get_directory)):
    menu = await load_menu(directory, tenant_id)
    view = filter_menu(menu, q)
    return {"query": q, "categories": [c.model_dump(by_alias=True, mode="json") for c in view]}
