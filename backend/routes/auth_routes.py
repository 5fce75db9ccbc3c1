from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.core.responses import api_response
from backend.database import get_db
from backend.repositories import account_repository

router = APIRouter(tags=['auth'])


class RegisterRequest(BaseModel):
    username: str | None = None
    name: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    account = account_repository.register_account(db, data.username, data.name, data.password, data.role)
    return api_response(
        {'account_id': account['account_id'], 'username': account['username']},
        status.HTTP_201_CREATED,
        'User registered successfully.',
    )


@router.post('/login')
def login(data: LoginRequest, db: Session = Depends(get_db)):
    account = account_repository.authenticate(db, data.username, data.password)
    token = jwt_handler.create_access_token(str(account['account_id']), account['role'])
    return api_response({'user': account, 'token': token}, status.HTTP_200_OK, 'Login successful.')
