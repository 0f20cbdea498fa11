import random

from retail_inventory.accumulator import accumulate, stock_levels
from retail_inventory.schemas import AdjustmentRecord, ReceiptLine, StockKey, StockLevel, TransferLine


def _transfer(item: str, quantity: int, source: str | None, destination: str | None) -> TransferLine:
    return TransferLine(item_id=item, quantity=quantity, from_location_id=source, to_location_id=destination)


def test_single_transfer_moves_stock_between_locations() -> None:
    totals = accumulate([_transfer("X", 5, "A", "B")], [])

    assert totals == {StockKey("X", "A"): -5, StockKey("X", "B"): 5}


def test_adjustment_lands_in_global_bucket() -> None:
    totals = accumulate([], [AdjustmentRecord(item_id="Y", adjustment=-3)])

    assert totals == {StockKey("Y", None): -3}


def test_transfer_and_adjustment_keep_independent_keys() -> None:
    totals = accumulate(
        [_transfer("X", 10, "A", "B")],
        [AdjustmentRecord(item_id="X", adjustment=-10)],
    )

    assert totals == {
        StockKey("X", "A"): -10,
        StockKey("X", "B"): 10,
        StockKey("X", None): -10,
    }


def test_round_trip_transfers_keep_zero_totals() -> None:
    totals = accumulate([_transfer("X", 4, "A", "B"), _transfer("X", 4, "B", "A")], [])

    assert totals == {StockKey("X", "A"): 0, StockKey("X", "B"): 0}


def test_transfer_without_locations_is_ignored() -> None:
    assert accumulate([_transfer("X", 7, None, None)], []) == {}


def test_one_sided_transfers() -> None:
    totals = accumulate([_transfer("X", 2, "A", None), _transfer("Y", 3, None, "B")], [])

    assert totals == {StockKey("X", "A"): -2, StockKey("Y", "B"): 3}


def test_receipts_add_to_their_store() -> None:
    totals = accumulate(
        [_transfer("X", 4, "A", "B")],
        [],
        [ReceiptLine(item_id="X", location_id="A", quantity=10)],
    )

    assert totals == {StockKey("X", "A"): 6, StockKey("X", "B"): 4}


def _random_history(rng: random.Random) -> tuple[list[TransferLine], list[AdjustmentRecord]]:
    items = ["X", "Y", "Z"]
    locations = ["A", "B", "C", None]
    transfers = [
        _transfer(rng.choice(items), rng.randint(1, 20), rng.choice(locations), rng.choice(locations))
        for _ in range(200)
    ]
    adjustments = [
        AdjustmentRecord(item_id=rng.choice(items), adjustment=rng.randint(-15, 15)) for _ in range(50)
    ]
    return transfers, adjustments


def test_totals_do_not_depend_on_record_order() -> None:
    rng = random.Random(1234)
    transfers, adjustments = _random_history(rng)
    expected = accumulate(transfers, adjustments)

    for _ in range(5):
        shuffled_transfers = transfers[:]
        shuffled_adjustments = adjustments[:]
        rng.shuffle(shuffled_transfers)
        rng.shuffle(shuffled_adjustments)
        assert accumulate(shuffled_transfers, shuffled_adjustments) == expected


def test_totals_match_the_sum_of_deltas() -> None:
    transfers, adjustments = _random_history(random.Random(99))
    totals = accumulate(transfers, adjustments)

    expected_a = sum(
        (line.quantity if line.to_location_id == "A" else 0) - (line.quantity if line.from_location_id == "A" else 0)
        for line in transfers
        if line.item_id == "X"
    )
    expected_global = sum(record.adjustment for record in adjustments if record.item_id == "X")

    assert totals.get(StockKey("X", "A"), 0) == expected_a
    assert totals.get(StockKey("X", None), 0) == expected_global


def test_accumulate_is_idempotent() -> None:
    transfers, adjustments = _random_history(random.Random(7))

    assert accumulate(transfers, adjustments) == accumulate(transfers, adjustments)


def test_stock_levels_drop_zero_totals_and_sort() -> None:
    totals = {
        StockKey("Y", "B"): 2,
        StockKey("X", "B"): 0,
        StockKey("X", "A"): -5,
        StockKey("X", None): 3,
    }

    assert stock_levels(totals) == [
        StockLevel(item_id="X", location_id=None, current_stock=3),
        StockLevel(item_id="X", location_id="A", current_stock=-5),
        StockLevel(item_id="Y", location_id="B", current_stock=2),
    ]
