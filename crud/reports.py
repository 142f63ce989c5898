import io
import logging
from collections import defaultdict
from decimal import Decimal
from typing import List, Optional
import pandas as pd
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session
from crud.inventory import get_items
from schemas.inventory import ItemCreate, Summary
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['supplier', 'item', 'category', 'quantity', 'price', 'sku', 'deletedAt', 'createdAt']
IMPORT_COLUMNS = ['sku', 'item', 'supplier', 'category', 'quantity', 'price']
EXPORT_FILENAME = "stock-export.csv"


def _isoformat(value) -> str:
    return value.isoformat() if value else ""


def export_csv(db: Session, supplier: Optional[str] = None, include_deleted: bool = False) -> str:
    """
    Render the filtered item list as CSV, one row per item in listing order
    """
    items = get_items(db, supplier=supplier, include_deleted=include_deleted)
    rows = [
        {
            "supplier": item.supplier.name,
            "item": item.item,
            "category": item.category.name,
            "quantity": item.quantity,
            "price": f"{Decimal(item.price):.2f}",
            "sku": item.sku or "",
            "deletedAt": _isoformat(item.deleted_at),
            "createdAt": _isoformat(item.created_at),
        }
        for item in items
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    logger.info("Exporting %d items (supplier=%s, include_deleted=%s)", len(df), supplier, include_deleted)
    return df.to_csv(index=False, lineterminator="\n")


def parse_csv(text: str) -> List[ItemCreate]:
    """
    Read a CSV upload into bulk-import rows. Blank cells are treated as absent
    """
    if not text or not text.strip():
        raise ValidationError("CSV body is empty")

    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError(f"Could not parse CSV: {e}")

    df.columns = [str(column).strip().lower() for column in df.columns]
    known = [column for column in IMPORT_COLUMNS if column in df.columns]
    if "item" not in known or "supplier" not in known:
        raise ValidationError("CSV must have item and supplier columns")

    rows = []
    for index, record in enumerate(df[known].to_dict(orient="records"), start=1):
        values = {key: value.strip() for key, value in record.items() if value and value.strip()}
        try:
            rows.append(ItemCreate(**values))
        except SchemaValidationError as e:
            fields = ", ".join(str(error["loc"][0]) for error in e.errors())
            raise ValidationError(f"row {index}: invalid {fields}")
    return rows


def get_summary(db: Session) -> Summary:
    """
    Stock value (quantity x price) per supplier, per category and overall,
    counting active items only
    """
    by_supplier = defaultdict(Decimal)
    by_category = defaultdict(Decimal)
    grand = Decimal(0)

    for item in get_items(db):
        total = Decimal(item.price) * item.quantity
        grand += total
        by_supplier[item.supplier.name] += total
        by_category[item.category.name] += total

    return Summary(
        bySupplier={name: float(total) for name, total in by_supplier.items()},
        byCategory={name: float(total) for name, total in by_category.items()},
        grand=float(grand),
    )
