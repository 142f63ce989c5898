import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Type, Union
from models.inventory import Supplier, Category
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SUPPLIERS = ["Bidfood", "Booker", "Adams"]
DEFAULT_CATEGORIES = ["Meats", "Drinks", "Frozen", "Ambient", "Veg", "Sauces", "Other"]

Reference = Union[Supplier, Category]


def get_by_name(db: Session, model: Type[Reference], name: str):
    return db.query(model).filter(model.name == name).first()


def resolve(db: Session, model: Type[Reference], name: str) -> Reference:
    """Find a supplier/category by exact name, creating it when missing.

    The insert runs in a savepoint so a concurrent insert of the same name
    only undoes this row; the winner is then read back. Flushes but does not
    commit, so callers decide the transaction boundary.
    """
    if not name or not name.strip():
        raise ValidationError("name required")

    existing = get_by_name(db, model, name)
    if existing:
        return existing

    try:
        with db.begin_nested():
            record = model(name=name)
            db.add(record)
        logger.info("Created %s %r", model.__name__, name)
        return record
    except IntegrityError:
        logger.info("%s %r created concurrently, reading it back", model.__name__, name)
        existing = get_by_name(db, model, name)
        if existing is None:
            raise
        return existing


def resolve_supplier(db: Session, name: str) -> Supplier:
    return resolve(db, Supplier, name)


def resolve_category(db: Session, name: str) -> Category:
    return resolve(db, Category, name)


def create_reference(db: Session, model: Type[Reference], name: str) -> Reference:
    record = resolve(db, model, name)
    db.commit()
    db.refresh(record)
    return record


def list_references(db: Session, model: Type[Reference]) -> List[Reference]:
    return db.query(model).order_by(model.name.asc()).all()


def seed_defaults(db: Session) -> None:
    if db.query(Supplier).count() == 0:
        db.add_all([Supplier(name=name) for name in DEFAULT_SUPPLIERS])
        logger.info("Seeded %d default suppliers", len(DEFAULT_SUPPLIERS))
    if db.query(Category).count() == 0:
        db.add_all([Category(name=name) for name in DEFAULT_CATEGORIES])
        logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
    db.commit()
