"""
Tests for the month build: day coverage, placement, reconciliation,
running balance, degraded sources and input validation.
"""

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal

import pytest

from core.config import EngineConfig
from core.errors import InputValidationError, UnsupportedFrequencyError
from core.schema import EventSource, Frequency, Kind, RecurringDefinition
from engine import CalendarEngine, build_month
from records.store import InMemoryRecordStore

from .conftest import RENT, USER, FailingStore, run


def _month(store, year=2025, month=2, override=None, config=None):
    return run(build_month(store, USER, year, month, override, config=config))


class TestRentScenario:
    """StartingBalance=1000, Rent 500 monthly from 2025-01-01, month 2025-02."""

    def test_projected_rent(self, rent_store):
        feb = _month(rent_store)
        day1 = feb.day(1)
        assert len(day1.events) == 1
        event = day1.events[0]
        assert event.kind is Kind.EXPENSE
        assert event.amount == Decimal("500.00")
        assert event.projected is True
        assert event.source is EventSource.RECURRING
        assert event.origin_id == "rec-rent"
        assert day1.end_balance == Decimal("500.00")
        assert feb.days[-1].end_balance == Decimal("500.00")
        assert feb.summary.ending_balance == Decimal("500.00")
        assert feb.starting_balance == Decimal("1000.00")

    def test_actual_rent_supersedes_projection(self, rent_store):
        rent_store.put_user(
            USER,
            recurring=[RENT],
            starting_balance={"startingBalance": 1000},
            transactions=[{"_id": "tx-rent", "description": "Rent", "amount": -520,
                           "date": "2025-02-01"}],
        )
        day1 = _month(rent_store).day(1)
        assert len(day1.events) == 1
        assert day1.events[0].amount == Decimal("520.00")
        assert day1.events[0].projected is False
        assert day1.events[0].source is EventSource.TRANSACTION
        assert day1.expense_total == Decimal("520.00")
        assert day1.end_balance == Decimal("480.00")

    def test_summary(self, rent_store):
        s = _month(rent_store).summary
        assert s.total_income == Decimal("0.00")
        assert s.total_expenses == Decimal("500.00")
        assert s.net_change == Decimal("-500.00")
        assert s.lowest_balance == Decimal("500.00")
        assert s.highest_balance == Decimal("1000.00")  # starting value counts

    def test_override_beats_stored_balance(self, rent_store):
        feb = _month(rent_store, override=Decimal("250.55"))
        assert feb.starting_balance == Decimal("250.55")
        assert feb.summary.ending_balance == Decimal("-249.45")

    def test_missing_starting_balance_is_zero(self):
        store = InMemoryRecordStore()
        store.put_user(USER, recurring=[RENT])
        feb = _month(store)
        assert feb.starting_balance == Decimal("0.00")
        assert feb.summary.lowest_balance == Decimal("-500.00")
        assert not feb.is_degraded


class TestDayCoverage:

    @pytest.mark.parametrize("year,month", [(2025, 2), (2024, 2), (2025, 4), (2025, 12), (1999, 1)])
    def test_one_ledger_per_day(self, rent_store, year, month):
        proj = _month(rent_store, year, month)
        n = calendar.monthrange(year, month)[1]
        assert len(proj.days) == n
        assert proj.start_date == date(year, month, 1)
        assert proj.end_date == date(year, month, n)
        assert [d.day for d in proj.days] == list(range(1, n + 1))
        for prev, nxt in zip(proj.days, proj.days[1:]):
            assert nxt.date - prev.date == timedelta(days=1)

    def test_empty_days_have_zero_totals(self, rent_store):
        day = _month(rent_store).day(15)
        assert day.events == ()
        assert day.income_total == Decimal("0.00")
        assert day.expense_total == Decimal("0.00")
        assert day.date_key == "2025-02-15"

    def test_day_index_out_of_range(self, rent_store):
        with pytest.raises(IndexError):
            _month(rent_store).day(29)


class TestReconciliation:

    def test_totals_match_events_and_balance_recurs(self, busy_store):
        for month in (1, 2, 3):
            proj = _month(busy_store, month=month)
            previous = proj.starting_balance
            for day in proj.days:
                income = sum((e.amount for e in day.events if e.kind is Kind.INCOME), Decimal(0))
                expense = sum((e.amount for e in day.events if e.kind is Kind.EXPENSE), Decimal(0))
                assert income == day.income_total
                assert expense == day.expense_total
                assert day.end_balance == previous + day.income_total - day.expense_total
                previous = day.end_balance

    def test_no_projection_survives_a_same_kind_actual(self, busy_store):
        proj = _month(busy_store)
        for day in proj.days:
            actual_kinds = {e.kind for e in day.events if not e.projected}
            assert not any(e.projected and e.kind in actual_kinds for e in day.events)

    def test_actual_income_replaces_paycheck_only(self, busy_store):
        proj = _month(busy_store)
        feb14 = proj.day(14)
        assert [(e.kind, e.projected) for e in feb14.events] == [(Kind.INCOME, False)]
        assert feb14.income_total == Decimal("1849.99")
        feb28 = proj.day(28)
        paycheck = [e for e in feb28.events if e.source is EventSource.PAYCHECK_STREAM]
        assert len(paycheck) == 1
        assert paycheck[0].name == "Paycheck"
        assert paycheck[0].origin_id == "paycheck"
        assert paycheck[0].amount == Decimal("1850.25")

    def test_actual_expense_keeps_projected_income(self, rent_store):
        rent_store.put_user(
            USER,
            recurring=[RENT, {"_id": "inc", "name": "Stipend", "amount": 100, "type": "income",
                              "frequency": "monthly", "startDate": "2025-01-01"}],
            transactions=[{"_id": "t", "description": "Rent", "amount": -500, "date": "2025-02-01"}],
        )
        day1 = _month(rent_store).day(1)
        assert {(e.kind, e.projected) for e in day1.events} == {
            (Kind.INCOME, True), (Kind.EXPENSE, False)
        }

    def test_several_actuals_same_day_all_kept(self, rent_store):
        rent_store.put_user(
            USER,
            recurring=[RENT],
            transactions=[
                {"_id": "a", "description": "Rent part 1", "amount": -300, "date": "2025-02-01"},
                {"_id": "b", "description": "Rent part 2", "amount": -200.5, "date": "2025-02-01"},
            ],
        )
        day1 = _month(rent_store).day(1)
        assert [e.origin_id for e in day1.events] == ["a", "b"]
        assert day1.expense_total == Decimal("500.50")

    def test_actual_carries_category(self, busy_store):
        day1 = _month(busy_store).day(1)
        actual = [e for e in day1.events if not e.projected]
        assert actual[0].category == "housing"

    def test_rebuild_is_identical(self, busy_store):
        assert _month(busy_store) == _month(busy_store)

    def test_cent_amounts_do_not_drift(self, busy_store):
        mar = _month(busy_store, month=3)
        for day in mar.days:
            assert day.end_balance == day.end_balance.quantize(Decimal("0.01"))
        s = mar.summary
        # side gig + two paychecks + refund; rent + five grocery runs
        assert s.total_income == Decimal("3832.80")
        assert s.total_expenses == Decimal("927.00")
        assert s.ending_balance == Decimal("3217.90")

    def test_inactive_paycheck_places_nothing(self):
        store = InMemoryRecordStore()
        store.put_user(USER, paycheck={"payAmount": 0, "startDate": "2025-01-03"})
        proj = _month(store)
        assert all(d.events == () for d in proj.days)


class TestPressurePoints:

    def test_rent_day_is_the_pressure_point(self, rent_store):
        points = _month(rent_store).pressure_points
        assert [p.date for p in points] == [date(2025, 2, 1)]
        assert points[0].expense_total == Decimal("500.00")
        assert points[0].end_balance == Decimal("500.00")

    def test_at_most_three_ranked(self, busy_store):
        points = _month(busy_store).pressure_points
        assert 0 < len(points) <= 3
        totals = [p.expense_total for p in points]
        assert totals == sorted(totals, reverse=True)
        assert all(t > 0 for t in totals)

    def test_limit_from_config(self, busy_store):
        proj = _month(busy_store, config=EngineConfig(pressure_point_limit=1))
        assert len(proj.pressure_points) == 1


class TestFrequencyHandling:

    def _store(self):
        store = InMemoryRecordStore()
        store.put_user(USER, recurring=[
            RENT,
            {"_id": "rec-daily", "name": "Coffee", "amount": 4, "type": "expense",
             "frequency": "daily", "startDate": "2025-01-01"},
        ])
        return store

    def test_strict_raises(self):
        with pytest.raises(UnsupportedFrequencyError) as exc:
            _month(self._store())
        assert exc.value.origin_id == "rec-daily"
        assert exc.value.frequency == "daily"

    def test_lenient_skips_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="cashcal"):
            proj = _month(self._store(), config=EngineConfig(strict_frequencies=False))
        assert proj.summary.total_expenses == Decimal("500.00")
        assert any("Coffee" in w for w in proj.warnings)
        assert any("Coffee" in r.getMessage() for r in caplog.records)

    def test_roll_policy_through_the_builder(self):
        store = InMemoryRecordStore()
        store.put_user(USER, recurring=[{**RENT, "startDate": "2025-01-31"}])
        clamp = _month(store)
        roll = _month(store, config=EngineConfig(month_end_policy="roll"))
        assert clamp.day(28).expense_total == Decimal("500.00")
        assert roll.summary.total_expenses == Decimal("0.00")

    def test_enum_frequency_record_is_projected(self):
        rent = RecurringDefinition(
            id="rec-rent", name="Rent", amount=Decimal("500"), kind=Kind.EXPENSE,
            frequency=Frequency.MONTHLY, start_date=date(2025, 1, 1),
        )
        store = InMemoryRecordStore()
        store.put_user(USER, recurring=[rent], starting_balance={"startingBalance": 1000})
        feb = _month(store)
        assert feb.day(1).expense_total == Decimal("500.00")
        assert feb.summary.ending_balance == Decimal("500.00")

    def test_paycheck_without_frequency_uses_config_default(self):
        store = InMemoryRecordStore()
        store.put_user(USER, paycheck={"payAmount": 100, "startDate": "2025-01-03"})
        biweekly = _month(store)
        weekly = _month(store, config=EngineConfig(default_paycheck_frequency="weekly"))
        assert [d.date for d in biweekly.days if d.events] == [date(2025, 2, 14), date(2025, 2, 28)]
        assert [d.date for d in weekly.days if d.events] == [date(2025, 2, d) for d in (7, 14, 21, 28)]

    def test_stored_paycheck_frequency_beats_config_default(self):
        store = InMemoryRecordStore()
        store.put_user(
            USER, paycheck={"payAmount": 100, "frequency": "monthly", "startDate": "2025-01-03"}
        )
        proj = _month(store, config=EngineConfig(default_paycheck_frequency="weekly"))
        assert [d.date for d in proj.days if d.events] == [date(2025, 2, 3)]

    def test_inactive_paycheck_with_unknown_frequency_does_not_abort(self):
        store = InMemoryRecordStore()
        store.put_user(
            USER,
            recurring=[RENT],
            paycheck={"payAmount": 0, "frequency": "daily", "startDate": "2025-01-03"},
        )
        proj = _month(store)
        assert proj.summary.total_expenses == Decimal("500.00")
        assert proj.summary.total_income == Decimal("0.00")

    @pytest.mark.parametrize(
        "kwargs", [{"month_end_policy": "nearest"}, {"default_paycheck_frequency": "daily"}]
    )
    def test_config_rejects_unknown_values(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestDegradedSources:

    def test_transactions_down(self, busy_store, caplog):
        store = FailingStore(failing={"transactions"})
        store._users = busy_store._users
        with caplog.at_level(logging.WARNING, logger="cashcal"):
            proj = _month(store)
        assert proj.degraded_sources == frozenset({"transactions"})
        assert proj.is_degraded
        assert "transactions unavailable; treated as empty" in proj.warnings
        # projections are back since no actual supersedes them
        assert proj.day(1).events[0].projected is True
        assert any("transactions" in r.getMessage() for r in caplog.records)

    def test_starting_balance_down_defaults_to_zero(self, rent_store):
        store = FailingStore(failing={"startingBalance"})
        store._users = rent_store._users
        proj = _month(store)
        assert proj.starting_balance == Decimal("0.00")
        assert proj.degraded_sources == frozenset({"startingBalance"})

    def test_everything_down_still_builds(self):
        store = FailingStore(failing={"recurring", "paycheckStream", "startingBalance", "transactions"})
        proj = _month(store)
        assert len(proj.days) == 28
        assert proj.summary.ending_balance == Decimal("0.00")
        assert len(proj.degraded_sources) == 4

    def test_override_still_wins_when_balance_source_down(self, rent_store):
        store = FailingStore(failing={"startingBalance"})
        store._users = rent_store._users
        assert _month(store, override=1000).summary.ending_balance == Decimal("500.00")


class TestInputValidation:

    @pytest.mark.parametrize("month", [0, 13, "x", None])
    def test_bad_month(self, rent_store, month):
        with pytest.raises(InputValidationError):
            _month(rent_store, month=month)

    def test_validation_happens_before_any_read(self):
        store = FailingStore(failing={"recurring"})
        with pytest.raises(InputValidationError):
            _month(store, month=13)

    def test_engine_facade(self, rent_store):
        engine = CalendarEngine(rent_store)
        feb = run(engine.build_month(USER, "2025", "2"))
        assert (feb.year, feb.month) == (2025, 2)
        assert feb.summary.ending_balance == Decimal("500.00")


class TestLastRepresentableMonth:

    def test_december_9999_builds(self):
        store = InMemoryRecordStore()
        store.put_user(
            USER,
            recurring=[
                {**RENT, "startDate": date(9999, 1, 1)},
                {"_id": "rec-gym", "name": "Gym", "amount": 10, "type": "expense",
                 "frequency": "weekly", "startDate": date(9999, 12, 1)},
            ],
            starting_balance={"startingBalance": 1000},
        )
        dec = _month(store, year=9999, month=12)
        assert len(dec.days) == 31
        assert dec.days[-1].date == date(9999, 12, 31)
        assert dec.summary.total_expenses == Decimal("550.00")
        assert dec.summary.ending_balance == Decimal("450.00")
