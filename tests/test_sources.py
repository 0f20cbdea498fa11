import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from retail_inventory import models
from retail_inventory.schemas import AdjustmentRecord, ReceiptLine, TransferLine
from retail_inventory.sources import DataAccessError, read_movements


def _add_transfer(db: Session, number: str, status: str, source, destination, lines) -> None:
    db.add(
        models.Transfer(
            transfer_number=number,
            from_store_id=source,
            to_store_id=destination,
            status=status,
            items=[models.TransferItem(item_id=item, quantity=quantity) for item, quantity in lines],
        )
    )
    db.commit()


def test_only_completed_transfers_are_read(db_session: Session, catalog: dict[str, str]) -> None:
    _add_transfer(db_session, "T-1", "completed", catalog["A"], catalog["B"], [(catalog["X"], 5)])
    _add_transfer(db_session, "T-2", "pending", catalog["A"], catalog["B"], [(catalog["X"], 9)])

    movements = read_movements(db_session)

    assert movements.transfer_lines == [
        TransferLine(item_id=catalog["X"], quantity=5, from_location_id=catalog["A"], to_location_id=catalog["B"])
    ]


def test_rows_missing_required_fields_are_skipped(
    db_session: Session, catalog: dict[str, str], caplog: pytest.LogCaptureFixture
) -> None:
    _add_transfer(
        db_session,
        "T-1",
        "completed",
        catalog["A"],
        catalog["B"],
        [(catalog["X"], None), (None, 3), (catalog["Y"], 2)],
    )
    db_session.add_all(
        [
            models.StockAdjustment(item_id=None, adjustment=4),
            models.StockAdjustment(item_id=catalog["X"], adjustment=None),
            models.StockAdjustment(item_id=catalog["X"], adjustment=-1),
        ]
    )
    db_session.commit()

    with caplog.at_level("WARNING", logger="retail_inventory.sources"):
        movements = read_movements(db_session)

    assert [line.item_id for line in movements.transfer_lines] == [catalog["Y"]]
    assert movements.adjustments == [AdjustmentRecord(item_id=catalog["X"], adjustment=-1)]
    assert len([r for r in caplog.records if "Skipping" in r.getMessage()]) == 4


def test_purchase_order_receipts(db_session: Session, catalog: dict[str, str]) -> None:
    db_session.add_all(
        [
            models.PurchaseOrder(
                po_number="PO-1",
                store_id=catalog["A"],
                status="completed",
                items=[
                    models.PurchaseOrderItem(item_id=catalog["X"], received_quantity=12),
                    models.PurchaseOrderItem(sku="SKU-Y", received_quantity=3),
                    models.PurchaseOrderItem(sku="UNKNOWN", received_quantity=8),
                    models.PurchaseOrderItem(item_id=catalog["Y"], received_quantity=None),
                ],
            ),
            models.PurchaseOrder(
                po_number="PO-2",
                store_id=None,
                status="completed",
                items=[models.PurchaseOrderItem(item_id=catalog["X"], received_quantity=50)],
            ),
            models.PurchaseOrder(
                po_number="PO-3",
                store_id=catalog["B"],
                status="ordered",
                items=[models.PurchaseOrderItem(item_id=catalog["X"], received_quantity=40)],
            ),
        ]
    )
    db_session.commit()

    movements = read_movements(db_session)

    assert movements.po_lines_read == 5
    assert sorted(movements.receipts, key=lambda r: (r.item_id, r.quantity)) == sorted(
        [
            ReceiptLine(item_id=catalog["X"], location_id=catalog["A"], quantity=12),
            ReceiptLine(item_id=catalog["Y"], location_id=catalog["A"], quantity=3),
            ReceiptLine(item_id=catalog["Y"], location_id=catalog["A"], quantity=0),
        ],
        key=lambda r: (r.item_id, r.quantity),
    )


def test_purchase_orders_can_be_excluded(db_session: Session, catalog: dict[str, str]) -> None:
    db_session.add(
        models.PurchaseOrder(
            po_number="PO-1",
            store_id=catalog["A"],
            status="completed",
            items=[models.PurchaseOrderItem(item_id=catalog["X"], received_quantity=12)],
        )
    )
    db_session.commit()

    movements = read_movements(db_session, include_purchase_orders=False)

    assert movements.receipts == []
    assert movements.po_lines_read == 0


def test_read_failure_raises_data_access_error(db_session: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(db_session, "execute", broken_execute)

    with pytest.raises(DataAccessError, match="connection refused"):
        read_movements(db_session)
