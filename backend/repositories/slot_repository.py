import logging
from datetime import time

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from backend.core.errors import NotFoundError, ValidationError
from backend.core.validation import validate_required_fields
from backend.database import reading, unit_of_work
from backend.models.practitioner import practitioner_slots
from backend.models.slot import Slot

logger = logging.getLogger(__name__)

WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')


def normalize_day(day: str) -> str:
    normalized = day.strip().capitalize()
    if normalized not in WEEKDAYS:
        raise ValidationError(f"day must be one of: {', '.join(WEEKDAYS)}.")
    return normalized


def _clean_slot(day: str | None, start: time | None, end: time | None) -> dict:
    validate_required_fields({'day': day, 'start': start, 'end': end}, ('day', 'start', 'end'))
    if end <= start:
        raise ValidationError('end must be later than start.')
    return {'day': normalize_day(day), 'start': start, 'end': end}


def serialize_slot(slot: Slot) -> dict:
    return {'slot_id': slot.id, 'day': slot.day, 'start': slot.start, 'end': slot.end}


def create_slot(db: Session, day: str | None, start: time | None, end: time | None) -> int:
    values = _clean_slot(day, start, end)

    with unit_of_work(db, 'creating slot'):
        slot = Slot(**values)
        db.add(slot)
        db.flush()
        slot_id = slot.id

    logger.info('Created slot %s (%s %s-%s).', slot_id, values['day'], start, end)
    return slot_id


def update_slot(db: Session, slot_id: int, day: str | None, start: time | None, end: time | None) -> dict:
    values = _clean_slot(day, start, end)

    with unit_of_work(db, 'updating slot'):
        slot = db.get(Slot, slot_id)
        if slot is None:
            raise NotFoundError('Slot not found.')
        for field, value in values.items():
            setattr(slot, field, value)
        db.flush()
        updated = serialize_slot(slot)

    return updated


def delete_slot(db: Session, slot_id: int) -> None:
    """Delete a catalog slot together with every availability that references it."""
    with unit_of_work(db, 'deleting slot'):
        db.execute(delete(practitioner_slots).where(practitioner_slots.c.slot_id == slot_id))
        result = db.execute(delete(Slot).where(Slot.id == slot_id).execution_options(synchronize_session=False))
        if result.rowcount == 0:
            raise NotFoundError('Slot not found.')

    logger.info('Deleted slot %s.', slot_id)


def get_slot(db: Session, slot_id: int) -> dict:
    with reading(db, 'fetching slot data'):
        slot = db.get(Slot, slot_id)
    if slot is None:
        raise NotFoundError('Slot not found.')
    return serialize_slot(slot)


def list_slots(db: Session) -> list[dict]:
    with reading(db, 'fetching slot data'):
        slots = db.scalars(select(Slot).order_by(Slot.id)).all()
    return [serialize_slot(slot) for slot in slots]
