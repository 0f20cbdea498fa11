"""Stock reconstruction runs."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from . import schemas
from .accumulator import accumulate, stock_levels
from .config import get_settings
from .snapshots import write_snapshots
from .sources import read_movements

logger = logging.getLogger(__name__)

SALES_NOT_DEDUCTED = (
    "Sales are not deducted from inventory: transactions carry no store, "
    "so they cannot be attributed to a location."
)


def _include_purchase_orders(include_purchase_orders: bool | None) -> bool:
    if include_purchase_orders is None:
        return get_settings().include_purchase_orders
    return include_purchase_orders


def calculate_stock_levels(
    db: Session, *, include_purchase_orders: bool | None = None
) -> list[schemas.StockLevel]:
    """Compute current stock from movement history without writing anything."""

    movements = read_movements(db, include_purchase_orders=_include_purchase_orders(include_purchase_orders))
    totals = accumulate(movements.transfer_lines, movements.adjustments, movements.receipts)
    return stock_levels(totals)


def recalculate_inventory(
    db: Session, *, include_purchase_orders: bool | None = None
) -> schemas.RecalculationResponse:
    """Rebuild ``store_inventory`` from the full movement history.

    Raises :class:`~retail_inventory.sources.DataAccessError` before anything
    is written when the history cannot be read.
    """

    logger.info("Starting inventory recalculation")
    movements = read_movements(db, include_purchase_orders=_include_purchase_orders(include_purchase_orders))
    logger.warning(SALES_NOT_DEDUCTED)

    totals = accumulate(movements.transfer_lines, movements.adjustments, movements.receipts)
    logger.info("Accumulated %d inventory entries", len(totals))

    written = write_snapshots(db, totals)

    stats = schemas.RecalculationStats(
        items_processed=written.items_processed,
        stores_processed=written.stores_processed,
        po_items_processed=movements.po_lines_read,
        transfer_lines_processed=len(movements.transfer_lines),
        adjustments_processed=len(movements.adjustments),
        inventory_entries_updated=written.updated,
        inventory_entries_inserted=written.inserted,
        zero_totals_skipped=written.zero_skipped,
    )
    if written.warnings:
        message = f"Inventory recalculated with {len(written.warnings)} failed write(s)"
    else:
        message = "Inventory recalculated successfully"
    logger.info("Recalculation complete. Updated: %d, Inserted: %d", written.updated, written.inserted)

    return schemas.RecalculationResponse(
        success=True,
        message=message,
        stats=stats,
        warnings=written.warnings or None,
    )
