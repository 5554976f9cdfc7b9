"""
Position management. Open to every admin, including plain (USER) admins.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import ListParams, authorize, list_params
from app.core.errors import NotFoundError
from app.crud import position as position_crud
from app.schemas.common import MessageResponse, Page, page_of
from app.schemas.position import PositionRequest, PositionResponse

router = APIRouter(
    prefix="/admin/positions",
    tags=["Positions"],
    dependencies=[Depends(authorize("positions"))],
)
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, position_id: str):
    position = position_crud.get_by_id(db, position_id)
    if not position:
        raise NotFoundError("Position not found")
    return position


@router.get("", response_model=Page[PositionResponse])
def list_positions(params: ListParams = Depends(list_params), db: Session = Depends(get_db)):
    result = position_crud.get_multi(db, params.page, params.limit, params.search)
    return page_of(PositionResponse, result)


@router.post("", response_model=PositionResponse, status_code=status.HTTP_201_CREATED)
def create_position(request: PositionRequest, db: Session = Depends(get_db)):
    """
    Create a position under a department.

    The name only has to be unique within its department.
    """
    position = position_crud.create(db, request)
    logger.info(f"Created position {position.id} ({position.name}) in department {position.department_id}")
    return position


@router.patch("/{position_id}", response_model=PositionResponse)
def update_position(position_id: str, request: PositionRequest, db: Session = Depends(get_db)):
    position = position_crud.update(db, _get_or_404(db, position_id), request)
    logger.info(f"Updated position {position.id}")
    return position


@router.delete("/{position_id}", response_model=MessageResponse)
def delete_position(position_id: str, db: Session = Depends(get_db)):
    position_crud.delete(db, _get_or_404(db, position_id))
    logger.info(f"Deleted position {position_id}")
    return {"message": "Position deleted successfully"}
