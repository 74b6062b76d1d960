"""
Profile endpoints — the protected resources of each namespace.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from jobboard.api.deps import get_current_company, get_current_user
from jobboard.models.account import Account
from jobboard.schemas.account import AccountRead, CompanyProfileRead, CompanyProfileUpdate

router = APIRouter(tags=["profiles"])


@router.get("/users/profile", response_model=AccountRead)
async def read_user_profile(current_user: Account = Depends(get_current_user)) -> Account:
    return current_user


@router.get("/company-profile", response_model=CompanyProfileRead)
async def read_company_profile(
    current_company: Account = Depends(get_current_company),
) -> Account:
    return current_company


@router.put("/company-profile", response_model=CompanyProfileRead)
async def update_company_profile(
    body: CompanyProfileUpdate,
    current_company: Account = Depends(get_current_company),
) -> Account:
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(current_company, field, value)
    return current_company
