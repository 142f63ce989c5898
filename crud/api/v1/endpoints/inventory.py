import logging
from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from typing import List, Optional
from database import get_db
from schemas.inventory import Item, ItemCreate, ItemUpdate, QuantityAdjust, BulkImportResult
from crud import inventory, reports
from crud.inventory import to_schema, is_truthy
from utils.access import require_key
from utils.errors import StoreError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


def _store_failure(action: str) -> StoreError:
    logger.exception("Store error while trying to %s", action)
    return StoreError(f"Failed to {action}")


@router.get("/items", response_model=List[Item])
def list_items(
    supplier: Optional[str] = None,
    category: Optional[str] = None,
    q: Optional[str] = None,
    sku: Optional[str] = None,
    includeDeleted: Optional[str] = None,
    db: Session = Depends(get_db)
):
    try:
        items = inventory.get_items(
            db,
            supplier=supplier,
            category=category,
            search=q,
            sku=sku,
            include_deleted=is_truthy(includeDeleted)
        )
    except SQLAlchemyError:
        raise _store_failure("fetch items")
    return [to_schema(db_item) for db_item in items]

@router.get("/items/{item_id}", response_model=Item)
def get_item(item_id: int, db: Session = Depends(get_db)):
    return to_schema(inventory.get_item(db, item_id))

@router.post("/items", response_model=Item, status_code=201, dependencies=[Depends(require_key)])
def create_item(item: ItemCreate, db: Session = Depends(get_db)):
    try:
        return to_schema(inventory.create_item(db, item))
    except SQLAlchemyError:
        raise _store_failure("create item")

@router.patch("/items/{item_id}", response_model=Item, dependencies=[Depends(require_key)])
def update_item(item_id: int, item_update: ItemUpdate, db: Session = Depends(get_db)):
    try:
        return to_schema(inventory.update_item(db, item_id, item_update))
    except SQLAlchemyError:
        raise _store_failure("update item")

@router.delete("/items/{item_id}", dependencies=[Depends(require_key)])
def delete_item(item_id: int, db: Session = Depends(get_db)):
    try:
        inventory.soft_delete_item(db, item_id)
    except SQLAlchemyError:
        raise _store_failure("delete item")
    return {"ok": True}

@router.post("/items/{item_id}/undelete", response_model=Item, dependencies=[Depends(require_key)])
def undelete_item(item_id: int, db: Session = Depends(get_db)):
    try:
        return to_schema(inventory.undelete_item(db, item_id))
    except SQLAlchemyError:
        raise _store_failure("undelete item")

@router.post("/items/{item_id}/adjust", response_model=Item, dependencies=[Depends(require_key)])
def adjust_item_quantity(item_id: int, adjustment: QuantityAdjust, db: Session = Depends(get_db)):
    try:
        return to_schema(inventory.update_item_quantity(db, item_id, adjustment.delta))
    except SQLAlchemyError:
        raise _store_failure("adjust quantity")

@router.post("/bulk/items", response_model=BulkImportResult, status_code=201, dependencies=[Depends(require_key)])
def bulk_import_items(rows: List[ItemCreate] = Body(...), db: Session = Depends(get_db)):
    try:
        created = inventory.bulk_import_items(db, rows)
    except SQLAlchemyError:
        raise _store_failure("bulk import")
    return BulkImportResult(count=len(created), items=[to_schema(db_item) for db_item in created])

@router.post("/import", response_model=BulkImportResult, status_code=201, dependencies=[Depends(require_key)])
async def import_csv(request: Request, db: Session = Depends(get_db)):
    """
    Bulk import from a raw CSV body (header row: sku,item,supplier,category,quantity,price)
    """
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("CSV body must be UTF-8 text")
    return await run_in_threadpool(_import_csv_text, db, text)


def _import_csv_text(db: Session, text: str) -> BulkImportResult:
    rows = reports.parse_csv(text)
    try:
        created = inventory.bulk_import_items(db, rows)
    except SQLAlchemyError:
        raise _store_failure("bulk import")
    return BulkImportResult(count=len(created), items=[to_schema(db_item) for db_item in created])
