import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from models.inventory import Supplier, Category
from schemas.inventory import Reference, ReferenceCreate
from crud import references
from utils.access import require_key
from utils.errors import ValidationError, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


def _create(db: Session, model, payload: ReferenceCreate, label: str):
    if not payload.name:
        raise ValidationError("name required")
    try:
        return references.create_reference(db, model, payload.name)
    except SQLAlchemyError:
        logger.exception("Creating %s %r failed", label, payload.name)
        raise StoreError(f"Failed to create {label}")


@router.get("/suppliers", response_model=List[Reference])
def list_suppliers(db: Session = Depends(get_db)):
    return references.list_references(db, Supplier)

@router.post("/suppliers", response_model=Reference, status_code=201, dependencies=[Depends(require_key)])
def create_supplier(payload: ReferenceCreate, db: Session = Depends(get_db)):
    return _create(db, Supplier, payload, "supplier")

@router.get("/categories", response_model=List[Reference])
def list_categories(db: Session = Depends(get_db)):
    return references.list_references(db, Category)

@router.post("/categories", response_model=Reference, status_code=201, dependencies=[Depends(require_key)])
def create_category(payload: ReferenceCreate, db: Session = Depends(get_db)):
    return _create(db, Category, payload, "category")
