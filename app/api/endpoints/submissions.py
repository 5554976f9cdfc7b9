"""
Submission review: list, view, remark, recommend and delete.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, get_current_session, list_params
from app.core.errors import NotFoundError
from app.crud import submission as submission_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.submission import (
    RemarkCreate,
    SubmissionDetailResponse,
    SubmissionUpdateRequest,
)
from app.schemas.user import SessionUser

router = APIRouter(
    prefix="/admin/submissions",
    tags=["Submissions"],
    dependencies=[Depends(authorize("submissions"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, submission_id: str):
    submission = submission_crud.get_by_id(db, submission_id)
    if not submission:
        raise NotFoundError("Submission not found")
    return submission


@router.get("", response_model=Page[SubmissionDetailResponse])
def list_submissions(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    """List submissions newest first, searching by candidate name or email."""
    result = submission_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(SubmissionDetailResponse, result)


@router.get("/{submission_id}", response_model=SubmissionDetailResponse)
def get_submission(submission_id: str, db: Session = Depends(get_db)):
    """Submission joined with its candidate, problem (with stacks), position and department."""
    return _get_or_404(db, submission_id)


@router.patch("/{submission_id}", response_model=SubmissionDetailResponse)
def update_submission(
    submission_id: str,
    request: SubmissionUpdateRequest,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    """
    Append a remark and/or set `recommendedForNextStep`.

    Remarks are append-only; earlier remarks are never changed.
    """
    submission = submission_crud.update(db, _get_or_404(db, submission_id), request, session)
    if request.recommended_for_next_step is not None:
        logger.info(
            f"Submission {submission.id} recommendation set to "
            f"{request.recommended_for_next_step} by {session.email}"
        )
    return submission


@router.post(
    "/{submission_id}/remarks",
    response_model=SubmissionDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_remark(
    submission_id: str,
    request: RemarkCreate,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    return submission_crud.add_remark(db, _get_or_404(db, submission_id), request.text, session)


@router.delete("/{submission_id}", response_model=MessageResponse)
def delete_submission(submission_id: str, db: Session = Depends(get_db)):
    submission_crud.delete(db, _get_or_404(db, submission_id))
    logger.info(f"Deleted submission {submission_id}")
    return {"message": "Submission deleted successfully"}
