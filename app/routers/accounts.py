# =============================================================================
# app/routers/accounts.py - Admin Account Endpoints
# =============================================================================
# Supabase Auth users that can sign in to the admin. Super admins only;
# other callers get 403.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.auth import AuthUser
from app.dependencies import UserDep
from app.exceptions import SuperAdminRequiredError
from core.models.account import Account, AccountCreate, AccountUpdate
from core.services.account_service import AccountService

Uid = Annotated[str, Path(description="Account (auth user) id")]


def require_super_admin(user: UserDep) -> AuthUser:
    """
    Raises:
        SuperAdminRequiredError: 403 for callers that are not super admins
    """
    if not user.is_super_admin:
        raise SuperAdminRequiredError("accounts")
    return user


router = APIRouter(dependencies=[Depends(require_super_admin)])


@router.get("", response_model=list[Account])
def list_accounts():
    """Every account with the tenants it is a member of."""
    return AccountService.list_accounts()


@router.post("", response_model=Account, status_code=status.HTTP_201_CREATED)
def create_account(payload: AccountCreate):
    """
    Create a confirmed account.

    With media_id the account is added to that tenant's members.
    """
    return AccountService.create_account(payload)


@router.get("/{uid}", response_model=Account)
def get_account(uid: Uid):
    return AccountService.get_account(uid)


@router.put("/{uid}", response_model=Account)
def update_account(uid: Uid, payload: AccountUpdate):
    return AccountService.update_account(uid, payload)


@router.delete("/{uid}")
def delete_account(uid: Uid):
    """Delete an account. 400 when it still owns a tenant."""
    AccountService.delete_account(uid)
    return {"success": True, "message": "Account deleted"}
