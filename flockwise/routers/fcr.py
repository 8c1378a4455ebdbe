import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import flockwise.crud.fcr as crud_fcr
from flockwise.database import get_db
from flockwise.models.audit_mixin import local_now
from flockwise.schemas.fcr import FCRReport
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user

router = APIRouter(prefix="/fcr", tags=["FCR"])
logger = logging.getLogger("fcr")


@router.get("/", response_model=FCRReport)
def get_batch_fcr(
    batch_id: int = Query(..., description="Batch to compute the feed conversion ratio for"),
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Feed conversion ratio, cost per kg and the FCR trend across weighings for one batch."""
    report = crud_fcr.get_batch_fcr(db, batch_id, today=local_now().date())
    if report is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    logger.info(f"FCR for batch {batch_id}: {report.metrics.fcr} ({report.metrics.performance})")
    return report
