"""Database access helpers for recording movement history."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas


class NotFoundError(LookupError):
    """Raised when a payload references an item or store that does not exist."""


class DuplicateRecordError(RuntimeError):
    """Raised when a unique business number is already taken."""


def _require_item(db: Session, item_id: str) -> None:
    if db.get(models.Item, item_id) is None:
        raise NotFoundError(f"Item {item_id} not found")


def _require_store(db: Session, store_id: Optional[str]) -> None:
    if store_id is not None and db.get(models.Store, store_id) is None:
        raise NotFoundError(f"Store {store_id} not found")


def create_item(db: Session, payload: schemas.ItemCreate) -> models.Item:
    item = models.Item(sku=payload.sku, name=payload.name)
    db.add(item)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateRecordError(f"SKU '{payload.sku}' already exists") from exc
    db.refresh(item)
    return item


def create_store(db: Session, payload: schemas.StoreCreate) -> models.Store:
    store = models.Store(name=payload.name)
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


def create_transfer(db: Session, payload: schemas.TransferCreate) -> models.Transfer:
    _require_store(db, payload.from_store_id)
    _require_store(db, payload.to_store_id)
    for line in payload.items:
        _require_item(db, line.item_id)

    transfer = models.Transfer(
        transfer_number=payload.transfer_number,
        from_store_id=payload.from_store_id,
        to_store_id=payload.to_store_id,
        status=payload.status,
        items=[models.TransferItem(item_id=line.item_id, quantity=line.quantity) for line in payload.items],
    )
    db.add(transfer)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateRecordError(f"Transfer '{payload.transfer_number}' already exists") from exc
    db.refresh(transfer)
    return transfer


def record_adjustment(db: Session, payload: schemas.AdjustmentCreate) -> models.StockAdjustment:
    _require_item(db, payload.item_id)
    adjustment = models.StockAdjustment(**payload.model_dump())
    db.add(adjustment)
    db.commit()
    db.refresh(adjustment)
    return adjustment


def create_purchase_order(db: Session, payload: schemas.PurchaseOrderCreate) -> models.PurchaseOrder:
    _require_store(db, payload.store_id)
    for line in payload.items:
        if line.item_id is not None:
            _require_item(db, line.item_id)

    order = models.PurchaseOrder(
        po_number=payload.po_number,
        store_id=payload.store_id,
        status=payload.status,
        items=[models.PurchaseOrderItem(**line.model_dump()) for line in payload.items],
    )
    db.add(order)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateRecordError(f"Purchase order '{payload.po_number}' already exists") from exc
    db.refresh(order)
    return order


def list_snapshots(
    db: Session, *, item_id: Optional[str] = None, store_id: Optional[str] = None
) -> list[models.StoreInventory]:
    statement = select(models.StoreInventory)
    if item_id:
        statement = statement.where(models.StoreInventory.item_id == item_id)
    if store_id:
        statement = statement.where(models.StoreInventory.store_id == store_id)
    statement = statement.order_by(models.StoreInventory.item_id, models.StoreInventory.store_id)
    return list(db.scalars(statement))
