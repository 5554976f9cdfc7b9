"""
Candidate scheduling endpoints (admin side).

Creating a candidate also creates their login and returns the generated
password once in `generatedPassword`; it stays visible to admins on the
candidate record afterwards.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, list_params
from app.core.errors import NotFoundError
from app.crud import candidate as candidate_crud
from app.schemas.candidate import (
    CandidateCreateRequest,
    CandidateResponse,
    CandidateUpdateRequest,
    CandidateWithPasswordResponse,
)
from app.schemas.common import MessageResponse, Page, page_of

router = APIRouter(
    prefix="/admin/candidates",
    tags=["Candidates"],
    dependencies=[Depends(authorize("candidates"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, candidate_id: str):
    candidate = candidate_crud.get_by_id(db, candidate_id)
    if not candidate:
        raise NotFoundError("Candidate not found")
    return candidate


@router.get("", response_model=Page[CandidateResponse])
def list_candidates(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    """List candidates newest first, searching by name or email."""
    result = candidate_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(CandidateResponse, result)


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(candidate_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, candidate_id)


@router.post("", response_model=CandidateWithPasswordResponse, status_code=status.HTTP_201_CREATED)
def create_candidate(request: CandidateCreateRequest, db: Session = Depends(get_db)):
    """
    Schedule a candidate.

    Creates the Candidate row and its paired CANDIDATE login in one transaction.
    `endTime` defaults to `scheduledTime` plus the configured test duration.
    """
    candidate, generated_password = candidate_crud.create(db, request)
    return CandidateWithPasswordResponse(
        candidate=CandidateResponse.model_validate(candidate),
        generated_password=generated_password,
    )


@router.patch("/{candidate_id}", response_model=CandidateWithPasswordResponse)
def update_candidate(candidate_id: str, request: CandidateUpdateRequest, db: Session = Depends(get_db)):
    """
    Update a candidate's assignment or schedule.

    With `regeneratePassword: true` a new password is generated, stored on both
    rows and returned in `generatedPassword`.
    """
    candidate = _get_or_404(db, candidate_id)
    candidate, generated_password = candidate_crud.update(db, candidate, request)
    logger.info(f"Updated candidate {candidate.id}")
    return CandidateWithPasswordResponse(
        candidate=CandidateResponse.model_validate(candidate),
        generated_password=generated_password,
    )


@router.delete("/{candidate_id}", response_model=MessageResponse)
def delete_candidate(candidate_id: str, db: Session = Depends(get_db)):
    """Delete a candidate together with their submission and login."""
    candidate_crud.delete(db, _get_or_404(db, candidate_id))
    return {"message": "Candidate deleted successfully"}
