"""Tests for the append-only finance ledger."""

from decimal import Decimal

import pytest

from extensions import db
from services import ledger


class TestRecordEntry:
    def test_amount_is_quantized(self, app_ctx, make_account):
        account = make_account()
        entry = ledger.record_entry(account.id, "12.5", ledger.CREDIT, "Top up")
        db.session.commit()
        assert entry.amount == Decimal("12.50")

    def test_rejects_unknown_type(self, app_ctx, make_account):
        account = make_account()
        with pytest.raises(ValueError):
            ledger.record_entry(account.id, 10, "REFUND", "Nope")

    def test_entry_is_not_committed_by_itself(self, app_ctx, make_account):
        account = make_account()
        ledger.record_entry(account.id, 10, ledger.CREDIT, "Staged")
        db.session.rollback()
        assert ledger.list_entries(account.id) == []


class TestSummarize:
    def test_empty_ledger(self, app_ctx, make_account):
        account = make_account()
        assert ledger.summarize(account.id) == {
            "total_credit": Decimal("0.00"),
            "total_debit": Decimal("0.00"),
            "balance": Decimal("0.00"),
        }

    def test_balance_is_credit_minus_debit(self, app_ctx, make_account):
        account = make_account()
        ledger.record_entry(account.id, "250.00", ledger.CREDIT, "Excess")
        ledger.record_entry(account.id, "100.00", ledger.DEBIT, "Rental")
        ledger.record_entry(account.id, "20.10", ledger.DEBIT, "Fee")
        db.session.commit()

        summary = ledger.summarize(account.id)
        assert summary["total_credit"] == Decimal("250.00")
        assert summary["total_debit"] == Decimal("120.10")
        assert summary["balance"] == Decimal("129.90")
        assert ledger.balance_for(account.id) == Decimal("129.90")

    def test_scoped_to_account(self, app_ctx, make_account):
        first, second = make_account(), make_account()
        ledger.record_entry(first.id, 50, ledger.CREDIT, "First")
        db.session.commit()
        assert ledger.summarize(second.id)["balance"] == Decimal("0.00")

    def test_filter_by_type(self, app_ctx, make_account):
        account = make_account()
        ledger.record_entry(account.id, 5, ledger.CREDIT, "In")
        ledger.record_entry(account.id, 3, ledger.DEBIT, "Out")
        db.session.commit()
        assert [e.type for e in ledger.list_entries(account.id, ledger.DEBIT)] == ["DEBIT"]
