import asyncio
import logging

from sommelier.core.config import settings
from sommelier.core.errors import EmptyInputError, InvalidCredentialsError, MenuValidationError
from sommelier.core.validation import validate_menu
from sommelier.db.directory import TenantDirectory
from sommelier.schemas.tenant import Tenant, TenantSnapshot

logger = logging.getLogger(__name__)


async def _lookup(directory: TenantDirectory, code: str) -> Tenant:
    if code is None or not code.strip():
        raise EmptyInputError()

    try:
        tenant = await asyncio.wait_for(
            directory.find_by_access_code(code),
            timeout=settings.LOOKUP_TIMEOUT_SECONDS,
        )
    except Exception as e:
        logger.exception(f"Tenant lookup failed: {e!r}")
        raise InvalidCredentialsError() from None

    if tenant is None:
        logger.warning("Login rejected: unknown access code")
        raise InvalidCredentialsError()
    return tenant


async def authenticate(directory: TenantDirectory, code: str) -> TenantSnapshot:
    """
    Resolve an access code to a tenant snapshot.

    Any non-empty string is a candidate code; the digits-only format is a
    login screen convention. Unknown codes, store failures, timeouts and
    stored menus that fail validation all raise the same
    InvalidCredentialsError so callers cannot tell which codes exist.
    Does not touch the session cache.
    """
    tenant = await _lookup(directory, code)

    # Stored menus are external data: validate before trusting them
    try:
        menu = validate_menu(tenant.menu)
    except MenuValidationError as e:
        logger.error(f"Stored menu for tenant {tenant.id} is invalid: {e}")
        raise InvalidCredentialsError() from None

    logger.info(f"Login succeeded for tenant {tenant.id}")
    return TenantSnapshot(
        tenant_id=tenant.id,
        display_name=tenant.name,
        theme=tenant.theme,
        menu=menu,
        menu_version=tenant.menu_version,
    )


async def resolve_tenant_id(directory: TenantDirectory, code: str) -> str:
    """
    Check an access code without loading its menu.

    Used to authorize menu writes: a tenant whose stored menu no longer
    validates must still be able to replace it. Failures are reported the
    same way as authenticate().
    """
    return (await _lookup(directory, code)).id
