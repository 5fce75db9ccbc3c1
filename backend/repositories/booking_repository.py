import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from backend.core.errors import NotFoundError, ValidationError
from backend.core.validation import validate_required_fields
from backend.database import reading, unit_of_work
from backend.models.booking import Booking
from backend.models.practitioner import Practitioner
from backend.models.user import Account

logger = logging.getLogger(__name__)

BOOKING_FIELDS = ('account_id', 'practitioner_id', 'date', 'time', 'method', 'status')


def _clean_booking(fields: Mapping[str, Any]) -> dict:
    validate_required_fields(fields, BOOKING_FIELDS)
    values = {field: fields[field] for field in BOOKING_FIELDS}
    values['method'] = str(values['method']).strip()
    values['status'] = str(values['status']).strip()
    note = fields.get('note')
    values['note'] = note.strip() if isinstance(note, str) and note.strip() else None
    return values


def _ensure_references_exist(db: Session, account_id: int, practitioner_id: int) -> None:
    if db.get(Account, account_id) is None:
        raise ValidationError(f'Unknown account id: {account_id}.')
    if db.get(Practitioner, practitioner_id) is None:
        raise ValidationError(f'Unknown practitioner id: {practitioner_id}.')


def _detail_query():
    return (
        select(
            Booking.id.label('booking_id'),
            Booking.account_id,
            Account.name.label('account_name'),
            Booking.practitioner_id,
            Practitioner.name.label('practitioner_name'),
            Practitioner.facility,
            Booking.date,
            Booking.time,
            Booking.method,
            Booking.status,
            Booking.note,
        )
        .join(Account, Account.id == Booking.account_id)
        .join(Practitioner, Practitioner.id == Booking.practitioner_id)
    )


def create_booking(db: Session, fields: Mapping[str, Any]) -> int:
    values = _clean_booking(fields)

    with unit_of_work(db, 'creating booking'):
        _ensure_references_exist(db, values['account_id'], values['practitioner_id'])
        booking = Booking(**values)
        db.add(booking)
        db.flush()
        booking_id = booking.id

    logger.info('Created booking %s for practitioner %s.', booking_id, values['practitioner_id'])
    return booking_id


def update_booking(db: Session, booking_id: int, fields: Mapping[str, Any]) -> None:
    values = _clean_booking(fields)

    with unit_of_work(db, 'updating booking'):
        _ensure_references_exist(db, values['account_id'], values['practitioner_id'])
        result = db.execute(
            update(Booking)
            .where(Booking.id == booking_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError('Booking not found.')


def update_booking_status(db: Session, booking_id: int, status: str | None) -> None:
    validate_required_fields({'status': status}, ('status',))

    with unit_of_work(db, 'updating booking status'):
        result = db.execute(
            update(Booking)
            .where(Booking.id == booking_id)
            .values(status=status.strip())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError('Booking not found.')

    logger.info('Booking %s status changed to %s.', booking_id, status.strip())


def delete_booking(db: Session, booking_id: int) -> None:
    with unit_of_work(db, 'deleting booking'):
        result = db.execute(
            delete(Booking).where(Booking.id == booking_id).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError('Booking not found.')


def get_booking(db: Session, booking_id: int) -> dict:
    with reading(db, 'fetching booking data'):
        row = db.execute(_detail_query().where(Booking.id == booking_id)).first()
    if row is None:
        raise NotFoundError('Booking not found.')
    return dict(row._mapping)


def list_bookings(db: Session) -> list[dict]:
    with reading(db, 'fetching booking data'):
        rows = db.execute(_detail_query().order_by(Booking.date, Booking.time)).all()
    return [dict(row._mapping) for row in rows]
