"""Pydantic schemas for movement records and API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StockKey(NamedTuple):
    """Identity of one accumulated total: an item at a location or the global bucket."""

    item_id: str
    location_id: Optional[str]


class TransferLine(BaseModel):
    """A line of a completed transfer, carrying the parent's locations."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., min_length=1)
    quantity: int
    from_location_id: Optional[str] = None
    to_location_id: Optional[str] = None


class AdjustmentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., min_length=1)
    adjustment: int


class ReceiptLine(BaseModel):
    """Quantity received on a completed purchase order line."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., min_length=1)
    location_id: str = Field(..., min_length=1)
    quantity: int


class StockLevel(BaseModel):
    item_id: str
    location_id: Optional[str] = None
    current_stock: int


class StockLevelsResponse(BaseModel):
    success: bool = True
    data: list[StockLevel]


class RecalculationStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items_processed: int = 0
    stores_processed: int = 0
    po_items_processed: int = 0
    transfer_lines_processed: int = 0
    adjustments_processed: int = 0
    inventory_entries_updated: int = 0
    inventory_entries_inserted: int = 0
    zero_totals_skipped: int = 0


class RecalculationResponse(BaseModel):
    success: bool = True
    message: str
    stats: RecalculationStats
    warnings: Optional[list[str]] = None


class FailureResponse(BaseModel):
    success: bool = False
    error: str


class TransferLinePayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    quantity: int = Field(..., gt=0)


class TransferCreate(BaseModel):
    transfer_number: str = Field(..., min_length=1, max_length=64)
    from_store_id: Optional[str] = None
    to_store_id: Optional[str] = None
    status: str = Field(default="draft", max_length=32)
    items: list[TransferLinePayload] = Field(default_factory=list)


class TransferRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    transfer_number: str
    from_store_id: Optional[str]
    to_store_id: Optional[str]
    status: str
    created_at: datetime
    items: list[TransferLinePayload]


class AdjustmentCreate(BaseModel):
    item_id: str
    adjustment: int = Field(..., description="Positive to add stock, negative to remove it")
    reason: Optional[str] = Field(None, max_length=256)


class AdjustmentRead(AdjustmentCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class PurchaseOrderLinePayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sku: Optional[str] = None
    item_id: Optional[str] = None
    received_quantity: Optional[int] = Field(None, ge=0)


class PurchaseOrderCreate(BaseModel):
    po_number: str = Field(..., min_length=1, max_length=64)
    store_id: Optional[str] = None
    status: str = Field(default="draft", max_length=32)
    items: list[PurchaseOrderLinePayload] = Field(default_factory=list)


class PurchaseOrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    po_number: str
    store_id: Optional[str]
    status: str
    created_at: datetime
    items: list[PurchaseOrderLinePayload]


class SnapshotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    store_id: Optional[str]
    quantity: int
    updated_at: datetime


class ItemCreate(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=256)


class ItemRead(ItemCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)


class StoreRead(StoreCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
