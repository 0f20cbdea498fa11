"""Fold movement records into net quantities per item and location."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping

from .schemas import AdjustmentRecord, ReceiptLine, StockKey, StockLevel, TransferLine


def accumulate(
    transfer_lines: Iterable[TransferLine],
    adjustments: Iterable[AdjustmentRecord],
    receipts: Iterable[ReceiptLine] = (),
) -> dict[StockKey, int]:
    """Return the signed net quantity change for every key the records touch.

    A transfer moves stock out of its source and into its destination;
    adjustments land in the global bucket (``location_id`` of ``None``).
    Keys netting to zero are kept.
    """

    totals: defaultdict[StockKey, int] = defaultdict(int)

    for line in transfer_lines:
        if line.from_location_id:
            totals[StockKey(line.item_id, line.from_location_id)] -= line.quantity
        if line.to_location_id:
            totals[StockKey(line.item_id, line.to_location_id)] += line.quantity

    for record in adjustments:
        totals[StockKey(record.item_id, None)] += record.adjustment

    for receipt in receipts:
        totals[StockKey(receipt.item_id, receipt.location_id)] += receipt.quantity

    return dict(totals)


def stock_levels(totals: Mapping[StockKey, int]) -> list[StockLevel]:
    """Return the nonzero totals as stock level rows, global bucket first per item."""

    ordered = sorted(totals.items(), key=lambda entry: (entry[0].item_id, entry[0].location_id or ""))
    return [
        StockLevel(item_id=key.item_id, location_id=key.location_id, current_stock=quantity)
        for key, quantity in ordered
        if quantity != 0
    ]
