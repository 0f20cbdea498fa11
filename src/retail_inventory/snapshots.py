"""Persist reconstructed totals into ``store_inventory``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .schemas import StockKey

logger = logging.getLogger(__name__)


class WriteError(RuntimeError):
    """Raised when a single snapshot row cannot be written."""

    def __init__(self, key: StockKey, cause: Exception) -> None:
        location = key.location_id or "global"
        reason = getattr(cause, "orig", cause)
        super().__init__(f"Failed to write stock for item {key.item_id} at {location}: {reason}")
        self.key = key


@dataclass(slots=True)
class SnapshotWriteResult:
    items_processed: int = 0
    stores_processed: int = 0
    updated: int = 0
    inserted: int = 0
    zero_skipped: int = 0
    warnings: list[str] = field(default_factory=list)


def _snapshot_query(key: StockKey):
    statement = select(models.StoreInventory).where(models.StoreInventory.item_id == key.item_id)
    if key.location_id is None:
        return statement.where(models.StoreInventory.store_id.is_(None))
    return statement.where(models.StoreInventory.store_id == key.location_id)


def _write_snapshot(db: Session, key: StockKey, quantity: int) -> bool:
    """Overwrite or create the row for *key*; return ``True`` when a row was inserted."""

    existing = db.execute(_snapshot_query(key)).scalar_one_or_none()
    if existing is not None:
        existing.quantity = quantity
        inserted = False
    else:
        db.add(models.StoreInventory(item_id=key.item_id, store_id=key.location_id, quantity=quantity))
        inserted = True
    db.commit()
    return inserted


def write_snapshots(db: Session, totals: Mapping[StockKey, int]) -> SnapshotWriteResult:
    """Replace snapshot quantities with *totals*, one committed write per key.

    Zero totals are skipped, leaving any existing row untouched. A failed
    write is rolled back and reported in ``warnings``; later keys still run.
    """

    result = SnapshotWriteResult(
        items_processed=len({key.item_id for key in totals}),
        stores_processed=len({key.location_id for key in totals if key.location_id is not None}),
    )

    for key, quantity in totals.items():
        if quantity == 0:
            result.zero_skipped += 1
            continue
        try:
            inserted = _write_snapshot(db, key, quantity)
        except SQLAlchemyError as exc:
            db.rollback()
            error = WriteError(key, exc)
            logger.error("%s", error)
            result.warnings.append(str(error))
            continue
        if inserted:
            result.inserted += 1
        else:
            result.updated += 1

    logger.info(
        "Snapshots written. Updated: %d, Inserted: %d, Skipped zero totals: %d",
        result.updated,
        result.inserted,
        result.zero_skipped,
    )
    return result
