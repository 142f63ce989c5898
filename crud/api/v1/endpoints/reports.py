import logging
from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from crud import reports
from crud.inventory import is_truthy
from schemas.inventory import Summary
from utils.errors import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/export")
def export_items(
    supplier: Optional[str] = None,
    includeDeleted: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Download the filtered stock list as CSV
    """
    try:
        content = reports.export_csv(db, supplier=supplier, include_deleted=is_truthy(includeDeleted))
    except SQLAlchemyError:
        logger.exception("CSV export failed")
        raise StoreError("Failed export")

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{reports.EXPORT_FILENAME}"'}
    )

@router.get("/summary", response_model=Summary)
def get_summary(db: Session = Depends(get_db)):
    """
    Stock value totals by supplier, by category and overall for active items
    """
    try:
        return reports.get_summary(db)
    except SQLAlchemyError:
        logger.exception("Summary failed")
        raise StoreError("Failed summary")
