from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional

from sommelier.schemas.menu import PairingTier, WinePairing
from sommelier.schemas.violation import Violation


class LoginRequest(BaseModel):
    code: str = ""


class MenuCommitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so the menu validator can report every violation at once
    menu: Any = None
    expected_version: Optional[int] = Field(None, alias="expectedVersion")


class CommitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    menu_version: int = Field(..., alias="menuVersion")


class ValidationErrorResponse(BaseModel):
    detail: str
    violations: List[Violation]


class PairingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dish: str
    tier: PairingTier
    tier_label: str = Field(..., alias="tierLabel")
    pairing: WinePairing
