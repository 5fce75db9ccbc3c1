import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.core import config
from backend.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from backend.core.validation import validate_required_fields
from backend.database import reading, unit_of_work
from backend.models.user import Account

logger = logging.getLogger(__name__)


def serialize_account(account: Account) -> dict:
    return {
        'account_id': account.id,
        'username': account.username,
        'name': account.name,
        'role': account.role,
    }


def register_account(
    db: Session,
    username: str | None,
    name: str | None,
    password: str | None,
    role: str | None = None,
) -> dict:
    validate_required_fields(
        {'username': username, 'name': name, 'password': password},
        ('username', 'name', 'password'),
    )
    normalized_username = username.strip().lower()
    normalized_role = (role or config.DEFAULT_ROLE).strip().lower()
    if normalized_role not in {config.DEFAULT_ROLE, config.ADMIN_ROLE}:
        raise ValidationError('Invalid role.')

    with unit_of_work(db, 'registering account'):
        existing = db.scalar(select(Account.id).where(Account.username == normalized_username))
        if existing is not None:
            raise ConflictError('Username is already registered.')

        account = Account(
            username=normalized_username,
            name=name.strip(),
            hashed_password=hash_password(password),
            role=normalized_role,
        )
        db.add(account)
        try:
            db.flush()
        except IntegrityError as exc:
            # A concurrent registration took the username after the check above.
            raise ConflictError('Username is already registered.') from exc
        registered = serialize_account(account)

    logger.info('Registered account %s.', registered['account_id'])
    return registered


def authenticate(db: Session, username: str | None, password: str | None) -> dict:
    if not username or not password:
        raise ValidationError('Username and password are required.')

    with reading(db, 'authenticating account'):
        account = db.scalar(select(Account).where(Account.username == username.strip().lower()))

    if account is None or not verify_password(password, account.hashed_password):
        logger.warning('Failed login attempt for %s.', username)
        raise AuthenticationError('Invalid username or password.')

    return serialize_account(account)


def get_account(db: Session, account_id: int) -> dict:
    with reading(db, 'fetching account data'):
        account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError('Account not found.')
    return serialize_account(account)


def list_accounts(db: Session) -> list[dict]:
    with reading(db, 'fetching account data'):
        accounts = db.scalars(select(Account).order_by(Account.id)).all()
    return [serialize_account(account) for account in accounts]
