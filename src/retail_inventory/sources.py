"""Read movement history and map it into typed records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .schemas import AdjustmentRecord, ReceiptLine, TransferLine

logger = logging.getLogger(__name__)


class DataAccessError(RuntimeError):
    """Raised when movement history cannot be read."""


@dataclass(slots=True)
class MovementSet:
    """Everything a reconstruction run folds into stock totals."""

    transfer_lines: list[TransferLine] = field(default_factory=list)
    adjustments: list[AdjustmentRecord] = field(default_factory=list)
    receipts: list[ReceiptLine] = field(default_factory=list)
    po_lines_read: int = 0


def _fetch(db: Session, statement, source: str) -> Sequence[Any]:
    try:
        return db.execute(statement).all()
    except SQLAlchemyError as exc:
        raise DataAccessError(f"Failed to read {source}: {exc}") from exc


def read_transfer_lines(db: Session) -> list[TransferLine]:
    """Return lines of completed transfers with their parent's locations."""

    statement = (
        select(
            models.TransferItem.id,
            models.TransferItem.item_id,
            models.TransferItem.quantity,
            models.Transfer.from_store_id,
            models.Transfer.to_store_id,
        )
        .join(models.Transfer, models.TransferItem.transfer_id == models.Transfer.id)
        .where(models.Transfer.status == models.TRANSFER_COMPLETED)
    )
    lines: list[TransferLine] = []
    for row in _fetch(db, statement, "transfers"):
        try:
            lines.append(
                TransferLine(
                    item_id=row.item_id,
                    quantity=row.quantity,
                    from_location_id=row.from_store_id,
                    to_location_id=row.to_store_id,
                )
            )
        except ValidationError:
            logger.warning("Skipping transfer line %s: missing item or quantity", row.id)
    return lines


def read_adjustments(db: Session) -> list[AdjustmentRecord]:
    statement = select(
        models.StockAdjustment.id,
        models.StockAdjustment.item_id,
        models.StockAdjustment.adjustment,
    )
    records: list[AdjustmentRecord] = []
    for row in _fetch(db, statement, "stock adjustments"):
        try:
            records.append(AdjustmentRecord(item_id=row.item_id, adjustment=row.adjustment))
        except ValidationError:
            logger.warning("Skipping stock adjustment %s: missing item or adjustment", row.id)
    return records


def read_receipts(db: Session) -> tuple[list[ReceiptLine], int]:
    """Return received lines of completed purchase orders and the number of lines read.

    Lines without an ``item_id`` are resolved through their SKU; lines that
    stay unresolved, or whose order has no store, contribute nothing.
    """

    items_by_sku = {
        row.sku: row.id for row in _fetch(db, select(models.Item.id, models.Item.sku), "items")
    }
    statement = (
        select(
            models.PurchaseOrderItem.id,
            models.PurchaseOrderItem.sku,
            models.PurchaseOrderItem.item_id,
            models.PurchaseOrderItem.received_quantity,
            models.PurchaseOrder.store_id,
        )
        .join(models.PurchaseOrder, models.PurchaseOrderItem.purchase_order_id == models.PurchaseOrder.id)
        .where(models.PurchaseOrder.status == models.PURCHASE_ORDER_COMPLETED)
    )
    rows = _fetch(db, statement, "purchase orders")

    receipts: list[ReceiptLine] = []
    for row in rows:
        if not row.store_id:
            continue
        item_id = row.item_id or items_by_sku.get(row.sku)
        if not item_id:
            logger.warning("Skipping purchase order line %s: item could not be resolved", row.id)
            continue
        receipts.append(ReceiptLine(item_id=item_id, location_id=row.store_id, quantity=row.received_quantity or 0))
    return receipts, len(rows)


def read_movements(db: Session, *, include_purchase_orders: bool = True) -> MovementSet:
    """Read every movement source, failing fast with :class:`DataAccessError`."""

    movements = MovementSet(
        transfer_lines=read_transfer_lines(db),
        adjustments=read_adjustments(db),
    )
    if include_purchase_orders:
        movements.receipts, movements.po_lines_read = read_receipts(db)

    logger.info(
        "Read %d transfer lines, %d adjustments, %d purchase order lines",
        len(movements.transfer_lines),
        len(movements.adjustments),
        movements.po_lines_read,
    )
    return movements
