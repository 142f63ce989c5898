import logging
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from models.inventory import Item, Supplier, Category, utcnow
from schemas.inventory import ItemCreate, ItemUpdate
from schemas.inventory import Item as ItemSchema
from crud.references import resolve_supplier, resolve_category
from utils.errors import ValidationError, NotFoundError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "item, supplier, category required"
BULK_REQUIRED_FIELDS_MESSAGE = "item, supplier required"
DEFAULT_CATEGORY = "Other"


def to_schema(db_item: Item) -> ItemSchema:
    return ItemSchema(
        id=db_item.id,
        sku=db_item.sku or "",
        item=db_item.item,
        quantity=db_item.quantity,
        price=float(db_item.price),
        supplier=db_item.supplier.name,
        category=db_item.category.name,
        supplier_id=db_item.supplier_id,
        category_id=db_item.category_id,
        deleted_at=db_item.deleted_at,
        created_at=db_item.created_at,
        updated_at=db_item.updated_at,
    )


def is_truthy(value: Optional[str]) -> bool:
    """Query-string flags count as set unless empty or "false"."""
    return bool(value) and value.lower() != "false"


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _with_relations(query):
    return query.options(joinedload(Item.supplier), joinedload(Item.category))


def get_item(db: Session, item_id: int) -> Item:
    db_item = _with_relations(db.query(Item)).filter(Item.id == item_id).first()
    if db_item is None:
        raise NotFoundError("Item not found")
    return db_item


def get_items(db: Session,
    supplier: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sku: Optional[str] = None,
    include_deleted: bool = False) -> List[Item]:
    query = _with_relations(db.query(Item))

    if supplier:
        query = query.filter(Item.supplier.has(Supplier.name == supplier))
    if category:
        query = query.filter(Item.category.has(Category.name == category))
    if search:
        query = query.filter(Item.item.ilike(f'%{search}%'))
    if sku:
        query = query.filter(Item.sku == sku)
    if not include_deleted:
        query = query.filter(Item.deleted_at.is_(None))

    return query.order_by(Item.created_at.desc(), Item.id.desc()).all()


def _build_item(db: Session, data: ItemCreate, category_name: str) -> Item:
    db_supplier = resolve_supplier(db, data.supplier)
    db_category = resolve_category(db, category_name)
    db_item = Item(
        sku=data.sku or None,
        item=data.item,
        quantity=data.quantity or 0,
        price=data.price or 0,
        supplier_id=db_supplier.id,
        category_id=db_category.id,
    )
    db.add(db_item)
    db.flush()
    return db_item


def create_item(db: Session, data: ItemCreate) -> Item:
    if not data.item or not data.supplier or not data.category:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    db_item = _build_item(db, data, data.category)
    db.commit()
    logger.info("Created item %s (%r)", db_item.id, db_item.item)
    return get_item(db, db_item.id)


def update_item(db: Session, item_id: int, item_update: ItemUpdate) -> Item:
    db_item = get_item(db, item_id)
    update_data = item_update.model_dump(exclude_unset=True)

    if "sku" in update_data:
        db_item.sku = update_data["sku"] or None
    if "item" in update_data:
        if not update_data["item"]:
            raise ValidationError("item cannot be empty")
        db_item.item = update_data["item"]
    if "quantity" in update_data:
        db_item.quantity = update_data["quantity"] or 0
    if "price" in update_data:
        db_item.price = update_data["price"] or 0
    if update_data.get("supplier"):
        db_item.supplier_id = resolve_supplier(db, update_data["supplier"]).id
    if update_data.get("category"):
        db_item.category_id = resolve_category(db, update_data["category"]).id
    if update_data.get("undelete"):
        db_item.deleted_at = None

    db.commit()
    return get_item(db, item_id)


def soft_delete_item(db: Session, item_id: int) -> Item:
    db_item = get_item(db, item_id)
    db_item.deleted_at = utcnow()
    db.commit()
    logger.info("Soft-deleted item %s", item_id)
    return db_item


def undelete_item(db: Session, item_id: int) -> Item:
    db_item = get_item(db, item_id)
    db_item.deleted_at = None
    db.commit()
    db.refresh(db_item)
    return db_item


def update_item_quantity(db: Session, item_id: int, quantity_change: int) -> Item:
    db_item = get_item(db, item_id)

    db_item.quantity += quantity_change
    if db_item.quantity < 0:
        db_item.quantity = 0
    db.commit()
    db.refresh(db_item)
    return db_item


def bulk_import_items(db: Session, rows: List[ItemCreate]) -> List[Item]:
    """Create every row or none of them.

    Rows are applied in order inside one transaction; the first invalid row
    rolls the whole batch back and is reported by its 1-based position.
    """
    ids = []
    try:
        for index, row in enumerate(rows, start=1):
            if not _present(row.item) or not _present(row.supplier):
                raise ValidationError(f"row {index}: {BULK_REQUIRED_FIELDS_MESSAGE}")
            try:
                ids.append(_build_item(db, row, row.category or DEFAULT_CATEGORY).id)
            except ValidationError as e:
                raise ValidationError(f"row {index}: {e.message}") from e
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Bulk imported %d items", len(ids))
    if not ids:
        return []
    by_id = {db_item.id: db_item for db_item in _with_relations(db.query(Item)).filter(Item.id.in_(ids))}
    return [by_id[item_id] for item_id in ids]
