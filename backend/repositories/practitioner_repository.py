"""Practitioner availability: practitioner rows plus their catalog slots.

Every write runs as one unit of work, so a practitioner and its association
rows are either stored together or not at all. Reads reassemble the nested
record; the list read fetches the associations of every practitioner with a
single batched join instead of one query per practitioner.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import Session

from backend.core.errors import ConflictError, NotFoundError, ValidationError
from backend.core.validation import validate_required_fields, validate_slot_ids
from backend.database import reading, unit_of_work
from backend.models.booking import Booking
from backend.models.practitioner import Practitioner, practitioner_slots
from backend.models.slot import Slot

logger = logging.getLogger(__name__)

PRACTITIONER_FIELDS = ('name', 'specialty', 'gender', 'phone', 'biography', 'facility')


def _clean_fields(fields: Mapping[str, Any]) -> dict[str, str]:
    validate_required_fields(fields, PRACTITIONER_FIELDS)
    return {field: str(fields[field]).strip() for field in PRACTITIONER_FIELDS}


def _slot_projection():
    return (
        select(
            practitioner_slots.c.practitioner_id,
            Slot.id.label('slot_id'),
            Slot.day,
            Slot.start,
            Slot.end,
        )
        .join(Slot, Slot.id == practitioner_slots.c.slot_id)
    )


def _serialize_slot(row) -> dict:
    return {
        'slot_id': row.slot_id,
        'day': row.day,
        'start': row.start,
        'end': row.end,
    }


def serialize_practitioner(practitioner: Practitioner, slots: list[dict]) -> dict:
    return {
        'practitioner_id': practitioner.id,
        'name': practitioner.name,
        'specialty': practitioner.specialty,
        'gender': practitioner.gender,
        'phone': practitioner.phone,
        'biography': practitioner.biography,
        'facility': practitioner.facility,
        'slots': slots,
    }


def _ensure_slots_exist(db: Session, slot_ids: Sequence[int]) -> None:
    if not slot_ids:
        return

    found = set(db.scalars(select(Slot.id).where(Slot.id.in_(slot_ids))).all())
    missing = [slot_id for slot_id in slot_ids if slot_id not in found]
    if missing:
        raise ValidationError(f"Unknown slot id(s): {', '.join(str(slot_id) for slot_id in missing)}.")


def _insert_associations(db: Session, practitioner_id: int, slot_ids: Sequence[int]) -> None:
    if not slot_ids:
        return

    # One multi-row INSERT for the whole set.
    db.execute(
        insert(practitioner_slots).values(
            [{'practitioner_id': practitioner_id, 'slot_id': slot_id} for slot_id in slot_ids]
        )
    )


def _delete_associations(db: Session, practitioner_id: int) -> None:
    db.execute(delete(practitioner_slots).where(practitioner_slots.c.practitioner_id == practitioner_id))


def fetch_slots_for(db: Session, practitioner_ids: Iterable[int]) -> dict[int, list[dict]]:
    """Fetch the slot lists of many practitioners in one round trip.

    Returns a lookup keyed by practitioner id; ids without associations are
    absent from the lookup.
    """
    ids = list(dict.fromkeys(practitioner_ids))
    if not ids:
        return {}

    rows = db.execute(
        _slot_projection()
        .where(practitioner_slots.c.practitioner_id.in_(ids))
        .order_by(practitioner_slots.c.practitioner_id, Slot.id)
    ).all()

    grouped: defaultdict[int, list[dict]] = defaultdict(list)
    for row in rows:
        grouped[row.practitioner_id].append(_serialize_slot(row))
    return dict(grouped)


def create_practitioner(db: Session, fields: Mapping[str, Any], slot_ids: Any) -> int:
    values = _clean_fields(fields)
    normalized_slot_ids = validate_slot_ids(slot_ids)

    with unit_of_work(db, 'creating practitioner'):
        _ensure_slots_exist(db, normalized_slot_ids)

        practitioner = Practitioner(**values)
        db.add(practitioner)
        db.flush()
        practitioner_id = practitioner.id

        _insert_associations(db, practitioner_id, normalized_slot_ids)

    logger.info('Created practitioner %s with %d slot(s).', practitioner_id, len(normalized_slot_ids))
    return practitioner_id


def replace_practitioner(db: Session, practitioner_id: int, fields: Mapping[str, Any], slot_ids: Any) -> dict:
    values = _clean_fields(fields)
    normalized_slot_ids = validate_slot_ids(slot_ids, allow_empty=True)

    with unit_of_work(db, 'updating practitioner'):
        result = db.execute(
            update(Practitioner)
            .where(Practitioner.id == practitioner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError('Practitioner not found.')

        _ensure_slots_exist(db, normalized_slot_ids)
        _delete_associations(db, practitioner_id)
        _insert_associations(db, practitioner_id, normalized_slot_ids)

    logger.info('Replaced practitioner %s availability with %d slot(s).', practitioner_id, len(normalized_slot_ids))
    return get_practitioner(db, practitioner_id)


def delete_practitioner(db: Session, practitioner_id: int) -> None:
    with unit_of_work(db, 'deleting practitioner'):
        booking_count = db.scalar(
            select(func.count()).select_from(Booking).where(Booking.practitioner_id == practitioner_id)
        )
        if booking_count:
            raise ConflictError('Practitioner has bookings and cannot be deleted.')

        _delete_associations(db, practitioner_id)
        result = db.execute(
            delete(Practitioner)
            .where(Practitioner.id == practitioner_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError('Practitioner not found.')

    logger.info('Deleted practitioner %s.', practitioner_id)


def get_practitioner(db: Session, practitioner_id: int) -> dict:
    with reading(db, 'fetching practitioner data'):
        practitioner = db.get(Practitioner, practitioner_id)
        if practitioner is None:
            raise NotFoundError('Practitioner not found.')

        rows = db.execute(
            _slot_projection()
            .where(practitioner_slots.c.practitioner_id == practitioner_id)
            .order_by(Slot.id)
        ).all()

    return serialize_practitioner(practitioner, [_serialize_slot(row) for row in rows])


def list_practitioners(db: Session) -> list[dict]:
    with reading(db, 'fetching practitioner data'):
        practitioners = db.scalars(select(Practitioner).order_by(Practitioner.id)).all()
        slots_by_practitioner = fetch_slots_for(db, [practitioner.id for practitioner in practitioners])

    return [
        serialize_practitioner(practitioner, slots_by_practitioner.get(practitioner.id, []))
        for practitioner in practitioners
    ]
