"""Tests for walk-in payments, payment reverts and overdue marking."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from exceptions import InvalidQueryError, NotFoundError, PaymentRejectedError
from models import DownpaymentStatus, ScheduleStatus, TransactionStatus
from repos import TransactionRepo
from services import ContractService, PaymentService

from .conftest import SIGNED_AT

TODAY = date(2026, 1, 20)


def _balanced(contract) -> bool:
    return contract.total_paid_amount + contract.remaining_balance == contract.remaining_downpayment


class TestRecordPayment:
    def test_full_payment(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        result = PaymentService.record_payment(
            db, first.id, payment_method="check", reference_number="CHK-1001",
            processed_by="cashier", today=TODAY,
        )
        assert result.schedule.payment_status == ScheduleStatus.PAID
        assert result.schedule.paid_amount == Decimal("12500.00")
        assert result.schedule.remaining_amount == Decimal("0.00")
        assert result.schedule.paid_at is not None

        assert result.transaction.amount_paid == Decimal("12500.00")
        assert result.transaction.penalty_paid == Decimal("0.00")
        assert result.transaction.payment_method == "check"
        assert result.transaction.receipt_number.startswith("RCT-")
        assert result.transaction.receipt_number.endswith(f"{first.id:08d}")

        assert result.contract.total_paid_amount == Decimal("12500.00")
        assert result.contract.remaining_balance == Decimal("137500.00")
        assert result.contract.version == 2
        assert _balanced(result.contract)

    def test_partial_payment(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        result = PaymentService.record_payment(
            db, first.id, payment_type="partial", amount=Decimal("5000"), today=TODAY
        )
        assert result.schedule.payment_status == ScheduleStatus.PENDING
        assert result.schedule.paid_amount == Decimal("5000.00")
        assert result.schedule.remaining_amount == Decimal("7500.00")
        assert result.contract.remaining_balance == Decimal("145000.00")
        assert _balanced(result.contract)

    def test_partials_settle_the_installment(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        PaymentService.record_payment(db, first.id, payment_type="partial", amount=Decimal("5000"), today=TODAY)
        result = PaymentService.record_payment(
            db, first.id, payment_type="partial", amount=Decimal("7500"), today=TODAY
        )
        assert result.schedule.payment_status == ScheduleStatus.PAID
        assert len(TransactionRepo(db).list_for_schedule(first.id)) == 2

    def test_partial_below_minimum(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        with pytest.raises(PaymentRejectedError):
            PaymentService.record_payment(
                db, first.id, payment_type="partial", amount=Decimal("1249.99"), today=TODAY
            )

    def test_partial_above_remaining(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        with pytest.raises(PaymentRejectedError):
            PaymentService.record_payment(
                db, first.id, payment_type="partial", amount=Decimal("12500.01"), today=TODAY
            )

    def test_partial_without_amount(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        with pytest.raises(PaymentRejectedError):
            PaymentService.record_payment(db, first.id, payment_type="partial", today=TODAY)

    def test_unknown_payment_type(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        with pytest.raises(PaymentRejectedError):
            PaymentService.record_payment(db, first.id, payment_type="installment", today=TODAY)

    def test_already_paid(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        PaymentService.record_payment(db, first.id, today=TODAY)
        with pytest.raises(PaymentRejectedError):
            PaymentService.record_payment(db, first.id, today=TODAY)

    def test_unknown_schedule(self, db) -> None:
        with pytest.raises(NotFoundError):
            PaymentService.record_payment(db, 999, today=TODAY)

    def test_late_payment_penalty(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]  # due 2026-02-15, grace ends 2026-02-18
        result = PaymentService.record_payment(db, first.id, today=date(2026, 3, 20))
        assert result.transaction.penalty_paid == Decimal("375.00")
        assert result.schedule.penalty_amount == Decimal("375.00")
        assert result.transaction.amount_paid == Decimal("12500.00")

    def test_paying_everything_completes_downpayment(self, db, make_reservation) -> None:
        reservation = make_reservation()
        created = ContractService.create_contract(db, reservation.id, 2, signed_at=SIGNED_AT)
        for entry in created.payment_schedules:
            result = PaymentService.record_payment(db, entry.id, today=TODAY)
        assert result.contract.remaining_balance == Decimal("0.00")
        assert result.contract.total_paid_amount == Decimal("150000.00")
        assert result.contract.downpayment_status == DownpaymentStatus.COMPLETED

    def test_second_payment_on_same_installment(self, session_factory, contract_12) -> None:
        first_id = contract_12.payment_schedules[0].id
        cashier_a = session_factory()
        cashier_b = session_factory()
        try:
            # cashier B has the installment loaded while A takes the payment
            stale = ContractService.get_contract(cashier_b, contract_12.contract.id).payment_schedules[0]
            assert stale.payment_status == ScheduleStatus.PENDING
            PaymentService.record_payment(cashier_a, first_id, today=TODAY)

            with pytest.raises(PaymentRejectedError):
                PaymentService.record_payment(cashier_b, first_id, today=TODAY)

            assert len(TransactionRepo(cashier_b).list_for_schedule(first_id)) == 1
            contract = ContractService.get_contract(cashier_b, contract_12.contract.id).contract
            assert contract.total_paid_amount == Decimal("12500.00")
        finally:
            cashier_a.close()
            cashier_b.close()

    def test_partial_sees_concurrent_partial(self, session_factory, contract_12) -> None:
        first_id = contract_12.payment_schedules[0].id
        cashier_a = session_factory()
        cashier_b = session_factory()
        try:
            ContractService.get_contract(cashier_b, contract_12.contract.id)
            PaymentService.record_payment(
                cashier_a, first_id, payment_type="partial", amount=Decimal("10000"), today=TODAY
            )

            with pytest.raises(PaymentRejectedError):
                PaymentService.record_payment(
                    cashier_b, first_id, payment_type="partial", amount=Decimal("5000"), today=TODAY
                )
            result = PaymentService.record_payment(cashier_b, first_id, today=TODAY)
            assert result.transaction.amount_paid == Decimal("2500.00")
            assert result.contract.total_paid_amount == Decimal("12500.00")
            assert _balanced(result.contract)
        finally:
            cashier_a.close()
            cashier_b.close()


class TestRevertPayment:
    def test_restores_unpaid_state(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        PaymentService.record_payment(db, first.id, today=TODAY)

        result = PaymentService.revert_payment(db, first.id, today=TODAY)
        assert result.schedule.payment_status == ScheduleStatus.PENDING
        assert result.schedule.paid_amount == Decimal("0.00")
        assert result.schedule.remaining_amount == result.schedule.scheduled_amount
        assert result.schedule.paid_at is None
        assert result.transactions_reverted == 1
        assert result.contract.total_paid_amount == Decimal("0.00")
        assert result.contract.remaining_balance == Decimal("150000.00")

        transactions = TransactionRepo(db).list_for_schedule(first.id)
        assert [t.transaction_status for t in transactions] == [TransactionStatus.REVERTED]

    def test_revert_past_due_entry_is_overdue(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        PaymentService.record_payment(db, first.id, today=TODAY)
        result = PaymentService.revert_payment(db, first.id, today=date(2026, 3, 1))
        assert result.schedule.payment_status == ScheduleStatus.OVERDUE

    def test_revert_reopens_completed_downpayment(self, db, make_reservation) -> None:
        reservation = make_reservation()
        created = ContractService.create_contract(db, reservation.id, 1, signed_at=SIGNED_AT)
        only = created.payment_schedules[0]
        PaymentService.record_payment(db, only.id, today=TODAY)
        result = PaymentService.revert_payment(db, only.id, today=TODAY)
        assert result.contract.downpayment_status == DownpaymentStatus.IN_PROGRESS

    def test_unpaid_entry(self, db, contract_12) -> None:
        with pytest.raises(PaymentRejectedError):
            PaymentService.revert_payment(db, contract_12.payment_schedules[0].id)

    def test_unknown_schedule(self, db) -> None:
        with pytest.raises(NotFoundError):
            PaymentService.revert_payment(db, 999)

    def test_zero_amount_entry(self, db, make_reservation) -> None:
        reservation = make_reservation(price="100000.00", fee="20000.00")
        created = ContractService.create_contract(db, reservation.id, 6, signed_at=SIGNED_AT)
        with pytest.raises(PaymentRejectedError):
            PaymentService.revert_payment(db, created.payment_schedules[0].id, today=TODAY)

    def test_plan_change_after_revert_keeps_history(self, db, contract_12) -> None:
        first = contract_12.payment_schedules[0]
        PaymentService.record_payment(db, first.id, today=TODAY)
        PaymentService.revert_payment(db, first.id, today=TODAY)

        result = ContractService.change_plan(db, contract_12.contract.id, 24, today=TODAY)
        assert len(result.payment_schedules) == 24

        history = TransactionRepo(db).search(contract_id=contract_12.contract.id)
        assert len(history) == 1
        assert history[0].schedule_id is None
        assert history[0].transaction_status == TransactionStatus.REVERTED


class TestMarkOverdue:
    def test_marks_pending_past_due(self, db, contract_12) -> None:
        assert PaymentService.mark_overdue_schedules(db, today=date(2026, 4, 1)) == 2
        statuses = [s.payment_status for s in ContractService.get_contract(db, contract_12.contract.id).payment_schedules]
        assert statuses[:2] == [ScheduleStatus.OVERDUE, ScheduleStatus.OVERDUE]
        assert set(statuses[2:]) == {ScheduleStatus.PENDING}

    def test_skips_paid_and_already_overdue(self, db, contract_12) -> None:
        PaymentService.record_payment(db, contract_12.payment_schedules[0].id, today=TODAY)
        assert PaymentService.mark_overdue_schedules(db, today=date(2026, 4, 1)) == 1
        assert PaymentService.mark_overdue_schedules(db, today=date(2026, 4, 1)) == 0

    def test_nothing_due(self, db, contract_12) -> None:
        assert PaymentService.mark_overdue_schedules(db, today=TODAY) == 0

    def test_overdue_entry_can_still_be_paid(self, db, contract_12) -> None:
        PaymentService.mark_overdue_schedules(db, today=date(2026, 4, 1))
        result = PaymentService.record_payment(db, contract_12.payment_schedules[0].id, today=date(2026, 4, 1))
        assert result.schedule.payment_status == ScheduleStatus.PAID

    def test_fee_covered_contract_never_goes_overdue(self, db, make_reservation) -> None:
        reservation = make_reservation(price="100000.00", fee="20000.00")
        created = ContractService.create_contract(db, reservation.id, 6, signed_at=SIGNED_AT)
        assert PaymentService.mark_overdue_schedules(db, today=date(2027, 1, 1)) == 0
        statuses = {s.payment_status for s in ContractService.get_contract(db, created.contract.id).payment_schedules}
        assert statuses == {ScheduleStatus.PAID}


class TestListTransactions:
    def test_history_of_contract(self, db, contract_12) -> None:
        first, second = contract_12.payment_schedules[:2]
        PaymentService.record_payment(db, first.id, payment_method="check", today=TODAY)
        PaymentService.record_payment(db, second.id, today=date(2026, 3, 20))
        PaymentService.revert_payment(db, first.id, today=TODAY)

        history = PaymentService.list_transactions(db, contract_id=contract_12.contract.id)
        assert len(history.transactions) == 2
        assert history.transactions[0].schedule_id == second.id
        assert history.summary["total_transactions"] == 2
        assert history.summary["completed_count"] == 1
        assert history.summary["reverted_count"] == 1
        assert history.summary["total_amount_paid"] == Decimal("12500.00")
        assert history.summary["total_penalties_paid"] == Decimal("25.00")
        assert history.summary["payment_methods"] == ["cash", "check"]

    def test_filters(self, db, contract_12) -> None:
        first, second = contract_12.payment_schedules[:2]
        PaymentService.record_payment(db, first.id, payment_method="check", today=TODAY)
        PaymentService.record_payment(db, second.id, today=TODAY)
        contract_id = contract_12.contract.id

        by_schedule = PaymentService.list_transactions(db, schedule_id=second.id)
        assert [t.schedule_id for t in by_schedule.transactions] == [second.id]

        by_method = PaymentService.list_transactions(db, contract_id=contract_id, payment_method="check")
        assert [t.schedule_id for t in by_method.transactions] == [first.id]

        reverted = PaymentService.list_transactions(
            db, contract_id=contract_id, status=TransactionStatus.REVERTED
        )
        assert reverted.transactions == []
        assert reverted.summary["total_amount_paid"] == Decimal("0.00")

    def test_date_range(self, db, contract_12) -> None:
        PaymentService.record_payment(db, contract_12.payment_schedules[0].id, today=TODAY)
        contract_id = contract_12.contract.id
        today = date.today()

        around_today = PaymentService.list_transactions(
            db, contract_id=contract_id, start_date=today - timedelta(days=1), end_date=today + timedelta(days=1)
        )
        assert len(around_today.transactions) == 1

        later = PaymentService.list_transactions(db, contract_id=contract_id, start_date=today + timedelta(days=2))
        assert later.transactions == []

    def test_requires_contract_or_schedule(self, db) -> None:
        with pytest.raises(InvalidQueryError):
            PaymentService.list_transactions(db, payment_method="cash")
