from .inventory import (
    Reference, ReferenceCreate,
    Item, ItemCreate, ItemUpdate, QuantityAdjust,
    BulkImportResult, Summary
)
