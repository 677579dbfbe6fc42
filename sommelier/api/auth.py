from fastapi import APIRouter, Body, Depends, HTTPException

from sommelier.core.auth import authenticate
from sommelier.core.errors import EmptyInputError, InvalidCredentialsError
from sommelier.db.directory import TenantDirectory, get_directory
from sommelier.schemas.requests import LoginRequest

router = APIRouter()

@router.post("/auth/login")
async def login(
    request: LoginRequest = Body(...),
    directory: TenantDirectory = Depends(get_directory),
):
    """
    Exchange an access code for the tenant's menu snapshot.
    The client keeps the result in its session cache.
    """
    try:
        snapshot = await authenticate(directory, request.code)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=e.user_message)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=e.user_message)

    return snapshot.model_dump(by_alias=True, mode="json")
