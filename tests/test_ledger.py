"""Tests for ledger orchestration."""

from datetime import date
from decimal import Decimal

import pytest

from app.core.errors import NotFoundError, StorageError
from app.schemas.price_schedule import PriceScheduleCreate, PriceScheduleUpdate
from app.schemas.reading import ReadingCreate, ReadingUpdate
from app.services.ledger import (
    RentalLedger,
    TogglePaidCommand,
    add_one_month,
    group_by_schedule,
)
from app.services.storage import JsonRentalStore


class FailingWriteStore(JsonRentalStore):
    """JSON store whose reading updates always fail."""

    def update_reading(self, reading_id, data):
        raise StorageError("backend unavailable")


@pytest.fixture
def demo_ledger(tmp_path) -> RentalLedger:
    """Ledger over the JSON store's demo data."""
    return RentalLedger(JsonRentalStore(tmp_path / "ledger.json")).load()


@pytest.fixture
def empty_ledger(tmp_path) -> RentalLedger:
    """Ledger over an initialised, empty JSON store."""
    store = JsonRentalStore(tmp_path / "empty.json")
    store.initialize()
    return RentalLedger(store).load()


class TestAddOneMonth:
    """Unit tests for next-month date arithmetic."""

    def test_mid_month(self) -> None:
        assert add_one_month(date(2024, 7, 15)) == date(2024, 8, 15)

    def test_december_rolls_year(self) -> None:
        assert add_one_month(date(2024, 12, 15)) == date(2025, 1, 15)

    def test_clamps_to_month_end(self) -> None:
        assert add_one_month(date(2024, 1, 31)) == date(2024, 2, 29)
        assert add_one_month(date(2023, 1, 31)) == date(2023, 2, 28)


class TestBilledPeriods:
    """Tests for recomputation through the ledger."""

    def test_demo_data_totals(self, demo_ledger: RentalLedger) -> None:
        """Test the demo data set bills as expected."""
        periods = demo_ledger.billed_periods

        assert len(periods) == 4
        assert periods[0].total_amount == Decimal("3500000")
        assert periods[1].total_amount == Decimal("4387550")

    def test_results_cached_until_change(self, demo_ledger: RentalLedger) -> None:
        """Test repeated reads reuse the computed list."""
        assert demo_ledger.billed_periods is demo_ledger.billed_periods

    def test_mutation_triggers_recompute(self, demo_ledger: RentalLedger) -> None:
        """Test adding a schedule reprices affected periods."""
        before = demo_ledger.billed_periods

        demo_ledger.add_schedule(
            PriceScheduleCreate(
                effective_date="2024-07-01",
                electricity_price="5000",
                water_price="15000",
                base_rent="4000000",
            )
        )

        after = demo_ledger.billed_periods
        assert after is not before
        assert after[3].applied_schedule.effective_date == date(2024, 7, 1)
        assert after[2].applied_schedule.effective_date == date(2024, 1, 1)

    def test_inserted_reading_shifts_baseline(self, demo_ledger: RentalLedger) -> None:
        """Test an out-of-order insert changes the following period's baseline."""
        demo_ledger.add_reading(
            ReadingCreate(reading_date="2024-05-01", electricity_index="2400", water_index="128")
        )

        periods = demo_ledger.billed_periods
        may = next(p for p in periods if p.reading_date == date(2024, 5, 15))
        assert may.prev_electricity_index == Decimal("2400")
        assert may.electricity_usage == Decimal("118.5")

    def test_update_and_delete(self, demo_ledger: RentalLedger) -> None:
        """Test edits flow through the store and back into billing."""
        demo_ledger.update_reading("2", ReadingUpdate(is_electricity_reset=True))
        assert demo_ledger.billed_periods[1].electricity_usage == Decimal("2518.5")

        demo_ledger.delete_reading("1")
        assert len(demo_ledger.billed_periods) == 3
        assert demo_ledger.billed_periods[0].prev_electricity_index == Decimal("0")

    def test_schedule_update_and_delete(self, demo_ledger: RentalLedger) -> None:
        """Test repricing after a schedule changes or disappears."""
        demo_ledger.update_schedule("1", PriceScheduleUpdate(base_rent="3000000"))
        assert demo_ledger.billed_periods[0].total_amount == Decimal("3000000")

        demo_ledger.delete_schedule("1")
        assert all(p.total_amount == Decimal("0") for p in demo_ledger.billed_periods)


class TestLatestAndSuggestion:
    """Tests for the latest bill and the next-reading draft."""

    def test_latest_bill(self, demo_ledger: RentalLedger) -> None:
        latest = demo_ledger.latest_bill()
        assert latest.reading_date == date(2024, 7, 15)
        assert latest.is_paid is False

    def test_latest_bill_empty(self, empty_ledger: RentalLedger) -> None:
        assert empty_ledger.latest_bill() is None

    def test_suggestion_from_latest(self, demo_ledger: RentalLedger) -> None:
        """Test the draft is one month on with the latest indices."""
        draft = demo_ledger.suggest_next_reading()

        assert draft.reading_date == date(2024, 8, 15)
        assert draft.electricity_index == Decimal("2863.8")
        assert draft.water_index == Decimal("140.5")
        assert draft.is_electricity_reset is False
        assert draft.is_water_reset is False

    def test_suggestion_empty(self, empty_ledger: RentalLedger) -> None:
        assert empty_ledger.suggest_next_reading() is None


class TestTogglePaid:
    """Tests for the optimistic paid toggle."""

    def test_toggle_persists(self, demo_ledger: RentalLedger) -> None:
        """Test toggling writes through and updates the ledger."""
        result = demo_ledger.toggle_paid("4")

        assert result.is_paid is True
        assert demo_ledger.get_reading("4").is_paid is True
        assert demo_ledger.billed_periods[-1].is_paid is True
        assert demo_ledger.store.list_readings()[-1].is_paid is True

    def test_toggle_twice_restores(self, demo_ledger: RentalLedger) -> None:
        demo_ledger.toggle_paid("1")
        demo_ledger.toggle_paid("1")
        assert demo_ledger.get_reading("1").is_paid is True

    def test_failure_reverts(self, tmp_path) -> None:
        """Test a failed write puts the previous state back and re-raises."""
        ledger = RentalLedger(FailingWriteStore(tmp_path / "ledger.json")).load()

        with pytest.raises(StorageError):
            ledger.toggle_paid("4")

        assert ledger.get_reading("4").is_paid is False
        assert ledger.billed_periods[-1].is_paid is False

    def test_command_applies_before_write(self, tmp_path) -> None:
        """Test the tentative state is visible while the write is pending."""
        seen: list[bool] = []

        class ObservingStore(JsonRentalStore):
            def update_reading(self, reading_id, data):
                seen.append(ledger.get_reading(reading_id).is_paid)
                return super().update_reading(reading_id, data)

        ledger = RentalLedger(ObservingStore(tmp_path / "ledger.json")).load()
        TogglePaidCommand(ledger, "4").execute()

        assert seen == [True]

    def test_unknown_reading(self, demo_ledger: RentalLedger) -> None:
        with pytest.raises(NotFoundError):
            demo_ledger.toggle_paid("missing")


class TestGroupBySchedule:
    """Tests for grouping consecutive periods by applied schedule."""

    def test_groups_follow_schedule_changes(self, empty_ledger: RentalLedger) -> None:
        empty_ledger.add_schedule(
            PriceScheduleCreate(
                effective_date="2024-01-01",
                electricity_price="4500",
                water_price="15000",
                base_rent="3000000",
            )
        )
        empty_ledger.add_schedule(
            PriceScheduleCreate(
                effective_date="2024-03-01",
                electricity_price="4800",
                water_price="15000",
                base_rent="3500000",
            )
        )
        for reading_date in ["2023-12-15", "2024-01-15", "2024-02-15", "2024-03-15"]:
            empty_ledger.add_reading(
                ReadingCreate(reading_date=reading_date, electricity_index="0", water_index="0")
            )

        groups = empty_ledger.grouped_periods()

        assert [g.schedule.effective_date if g.schedule else None for g in groups] == [
            None,
            date(2024, 1, 1),
            date(2024, 3, 1),
        ]
        assert [len(g.periods) for g in groups] == [1, 2, 1]

    def test_empty(self) -> None:
        assert group_by_schedule([]) == []
