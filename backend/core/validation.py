import re
from collections.abc import Iterable, Mapping
from typing import Any

from backend.core.errors import ValidationError


def format_field_name(field_name: str) -> str:
    """Turn ``slot_ids`` or ``slotIds`` into ``slot ids`` for error messages."""
    spaced = re.sub(r'([A-Z])', r' \1', field_name).replace('_', ' ')
    return spaced.strip().lower()


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_required_fields(data: Mapping[str, Any], required_fields: Iterable[str]) -> None:
    for field in required_fields:
        if is_blank(data.get(field)):
            raise ValidationError(f'{format_field_name(field)} is required.')


def validate_slot_ids(slot_ids: Any, allow_empty: bool = False) -> list[int]:
    """Return the distinct slot ids in request order.

    Booleans are rejected even though they are ints in Python.
    """
    if slot_ids is None or not isinstance(slot_ids, (list, tuple)):
        raise ValidationError('slot ids must be a list of slot identifiers.')

    if not slot_ids and not allow_empty:
        raise ValidationError('slot ids must contain at least one slot.')

    normalized: list[int] = []
    for slot_id in slot_ids:
        if isinstance(slot_id, bool) or not isinstance(slot_id, int) or slot_id <= 0:
            raise ValidationError(f'Invalid slot id: {slot_id!r}.')
        normalized.append(slot_id)

    return list(dict.fromkeys(normalized))


def require_id(value: int | None, field_name: str) -> int:
    if value is None:
        raise ValidationError(f'{format_field_name(field_name)} is required.')
    return value
