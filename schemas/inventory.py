from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

PRICE_PLACES = Decimal("0.01")

class ReferenceCreate(BaseModel):
    name: Optional[str] = None

class Reference(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class ItemBase(BaseModel):
    sku: Optional[str] = None
    item: Optional[str] = None
    supplier: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("price")
    @classmethod
    def round_price(cls, value):
        # column holds 2 places
        if value is None:
            return value
        return value.quantize(PRICE_PLACES, rounding=ROUND_HALF_UP)

class ItemCreate(ItemBase):
    pass

class ItemUpdate(ItemBase):
    undelete: Optional[bool] = None

class QuantityAdjust(BaseModel):
    delta: int

class Item(BaseModel):
    id: int
    sku: str = ""
    item: str
    quantity: int
    price: float
    supplier: str
    category: str
    supplier_id: int
    category_id: int
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class BulkImportResult(BaseModel):
    count: int
    items: List[Item]

class Summary(BaseModel):
    bySupplier: Dict[str, float]
    byCategory: Dict[str, float]
    grand: float
