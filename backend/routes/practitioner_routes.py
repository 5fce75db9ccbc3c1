from typing import Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_claims
from backend.core.responses import api_response
from backend.core.validation import require_id
from backend.database import get_db
from backend.repositories import practitioner_repository

router = APIRouter(tags=['practitioners'], dependencies=[Depends(get_current_claims)])


class PractitionerRequest(BaseModel):
    """Every scalar field plus the complete desired slot set.

    Fields are optional here so missing ones are reported by the repository
    as a 400 naming the first absent field. ``slot_ids`` is passed through
    untouched so its shape is judged only after the scalar fields.
    """

    name: str | None = None
    specialty: str | None = None
    gender: str | None = None
    phone: str | None = None
    biography: str | None = None
    facility: str | None = None
    slot_ids: Any = None

    def fields(self) -> dict:
        return self.model_dump(exclude={'slot_ids'})


@router.get('')
def get_practitioners(
    practitioner_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    if practitioner_id is not None:
        practitioner = practitioner_repository.get_practitioner(db, practitioner_id)
        return api_response(practitioner, status.HTTP_200_OK, 'Practitioner retrieved successfully.')

    practitioners = practitioner_repository.list_practitioners(db)
    return api_response(practitioners, status.HTTP_200_OK, 'Practitioners retrieved successfully.')


@router.post('', status_code=status.HTTP_201_CREATED)
def create_practitioner(data: PractitionerRequest, db: Session = Depends(get_db)):
    practitioner_id = practitioner_repository.create_practitioner(db, data.fields(), data.slot_ids)
    return api_response(
        {'practitioner_id': practitioner_id},
        status.HTTP_201_CREATED,
        'Practitioner created successfully.',
    )


@router.put('')
def replace_practitioner(
    data: PractitionerRequest,
    practitioner_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    practitioner_id = require_id(practitioner_id, 'practitioner_id')
    practitioner = practitioner_repository.replace_practitioner(db, practitioner_id, data.fields(), data.slot_ids)
    return api_response(practitioner, status.HTTP_200_OK, 'Practitioner updated successfully.')


@router.delete('')
def delete_practitioner(
    practitioner_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    practitioner_id = require_id(practitioner_id, 'practitioner_id')
    practitioner_repository.delete_practitioner(db, practitioner_id)
    return api_response(None, status.HTTP_200_OK, 'Practitioner deleted successfully.')
