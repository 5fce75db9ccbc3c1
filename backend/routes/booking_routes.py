import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_claims
from backend.core.responses import api_response
from backend.core.validation import require_id
from backend.database import get_db
from backend.repositories import booking_repository

router = APIRouter(tags=['bookings'], dependencies=[Depends(get_current_claims)])

MAX_BOOKING_NOTE_LENGTH = 600


class BookingRequest(BaseModel):
    account_id: int | None = None
    practitioner_id: int | None = None
    date: datetime.date | None = None
    time: datetime.time | None = None
    method: str | None = None
    status: str | None = None
    note: str | None = None

    @field_validator('note')
    @classmethod
    def validate_note(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_BOOKING_NOTE_LENGTH:
            raise ValueError(f'Notes must be {MAX_BOOKING_NOTE_LENGTH} characters or fewer.')

        return normalized


@router.get('')
def get_bookings(
    booking_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    if booking_id is not None:
        booking = booking_repository.get_booking(db, booking_id)
        return api_response(booking, status.HTTP_200_OK, 'Booking retrieved successfully.')

    bookings = booking_repository.list_bookings(db)
    return api_response(bookings, status.HTTP_200_OK, 'Bookings retrieved successfully.')


@router.post('', status_code=status.HTTP_201_CREATED)
def create_booking(data: BookingRequest, db: Session = Depends(get_db)):
    booking_id = booking_repository.create_booking(db, data.model_dump())
    return api_response({'booking_id': booking_id}, status.HTTP_201_CREATED, 'Booking created successfully.')


@router.put('')
def update_booking(
    data: BookingRequest,
    booking_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    booking_id = require_id(booking_id, 'booking_id')
    booking_repository.update_booking(db, booking_id, data.model_dump())
    return api_response(None, status.HTTP_200_OK, 'Booking updated successfully.')


@router.put('/status')
def change_booking_status(
    booking_id: int | None = Query(default=None),
    booking_status: str | None = Query(default=None, alias='status'),
    db: Session = Depends(get_db),
):
    booking_id = require_id(booking_id, 'booking_id')
    booking_repository.update_booking_status(db, booking_id, booking_status)
    return api_response(None, status.HTTP_200_OK, 'Booking status updated successfully.')


@router.delete('')
def delete_booking(
    booking_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    booking_id = require_id(booking_id, 'booking_id')
    booking_repository.delete_booking(db, booking_id)
    return api_response(None, status.HTTP_200_OK, 'Booking deleted successfully.')
