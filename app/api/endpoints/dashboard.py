import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import authorize
from app.services import dashboard_service

router = APIRouter(
    prefix="/admin/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(authorize("dashboard"))],
)
logger = logging.getLogger(__name__)


@router.get("")
def get_dashboard(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Totals, recent activity and 7-day trends for the admin home page."""
    return dashboard_service.get_dashboard(db)
