from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.auth.dependencies import Claims, get_current_claims
from backend.core.errors import AuthorizationError
from backend.core.responses import api_response
from backend.database import get_db
from backend.repositories import account_repository

router = APIRouter(tags=['accounts'])


@router.get('')
def get_accounts(
    account_id: int | None = Query(default=None),
    claims: Claims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    if account_id is not None:
        # Admins may read any account, everyone else only their own.
        if not claims.is_admin and account_id != claims.subject_id:
            raise AuthorizationError()
        account = account_repository.get_account(db, account_id)
        return api_response(account, status.HTTP_200_OK, 'User retrieved successfully.')

    if not claims.is_admin:
        raise AuthorizationError()
    accounts = account_repository.list_accounts(db)
    return api_response(accounts, status.HTTP_200_OK, 'Users retrieved successfully.')
