from datetime import time

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_claims
from backend.core.responses import api_response
from backend.core.validation import require_id
from backend.database import get_db
from backend.repositories import slot_repository

router = APIRouter(tags=['slots'], dependencies=[Depends(get_current_claims)])


class SlotRequest(BaseModel):
    day: str | None = None
    start: time | None = None
    end: time | None = None


@router.get('')
def get_slots(
    slot_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    if slot_id is not None:
        slot = slot_repository.get_slot(db, slot_id)
        return api_response(slot, status.HTTP_200_OK, 'Slot retrieved successfully.')

    slots = slot_repository.list_slots(db)
    return api_response(slots, status.HTTP_200_OK, 'Slots retrieved successfully.')


@router.post('', status_code=status.HTTP_201_CREATED)
def create_slot(data: SlotRequest, db: Session = Depends(get_db)):
    slot_id = slot_repository.create_slot(db, data.day, data.start, data.end)
    return api_response({'slot_id': slot_id}, status.HTTP_201_CREATED, 'Slot created successfully.')


@router.put('')
def update_slot(
    data: SlotRequest,
    slot_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    slot_id = require_id(slot_id, 'slot_id')
    slot = slot_repository.update_slot(db, slot_id, data.day, data.start, data.end)
    return api_response(slot, status.HTTP_200_OK, 'Slot updated successfully.')


@router.delete('')
def delete_slot(
    slot_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    slot_id = require_id(slot_id, 'slot_id')
    slot_repository.delete_slot(db, slot_id)
    return api_response(None, status.HTTP_200_OK, 'Slot deleted successfully.')
