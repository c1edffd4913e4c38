"""Unit tests for milestone models and status vocabulary."""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from agency_finance.models.milestone import (
    LedgerTransaction,
    Milestone,
    MilestoneStatus,
    PaymentStatus,
    parse_workflow_status,
)


class TestParseWorkflowStatus:
    """Test translation of external status values."""

    @pytest.mark.parametrize("value", ["released", "Released", "RELEASED", " released "])
    def test_released_synonym_maps_to_completed(self, value):
        assert parse_workflow_status(value) == MilestoneStatus.COMPLETED

    def test_pending_synonym_maps_to_not_started(self):
        assert parse_workflow_status("PENDING") == MilestoneStatus.NOT_STARTED

    def test_workflow_names_accepted_in_any_case(self):
        assert parse_workflow_status("in_progress") == MilestoneStatus.IN_PROGRESS
        assert parse_workflow_status("CANCELLED") == MilestoneStatus.CANCELLED

    def test_enum_value_passes_through(self):
        assert parse_workflow_status(MilestoneStatus.COMPLETED) == MilestoneStatus.COMPLETED

    def test_unknown_value_lists_valid_values(self):
        with pytest.raises(ValueError, match="Unknown milestone status 'shipped'"):
            parse_workflow_status("shipped")


class TestPaymentStatus:
    """Test pending classification of payment statuses."""

    @pytest.mark.parametrize(
        "status", [PaymentStatus.PENDING, PaymentStatus.IN_PROGRESS, PaymentStatus.DELAYED]
    )
    def test_pending_statuses(self, status):
        assert status.is_pending is True

    @pytest.mark.parametrize("status", [PaymentStatus.RELEASED, PaymentStatus.CANCELLED])
    def test_not_pending_statuses(self, status):
        assert status.is_pending is False


class TestMilestone:
    """Test Milestone validation."""

    def test_defaults(self):
        milestone = Milestone(id="m-1", project_id="p-1", title="Design", amount="500")

        assert milestone.amount == Decimal("500")
        assert milestone.currency is None
        assert milestone.status == MilestoneStatus.NOT_STARTED
        assert milestone.payment_status == PaymentStatus.PENDING
        assert milestone.released_at is None

    def test_released_payment_requires_timestamp(self):
        with pytest.raises(ValidationError, match="released_at must be set"):
            Milestone(
                id="m-1",
                project_id="p-1",
                title="Design",
                amount="500",
                payment_status="RELEASED",
            )

    def test_released_payment_with_timestamp(self):
        milestone = Milestone(
            id="m-1",
            project_id="p-1",
            title="Design",
            amount="500",
            payment_status="RELEASED",
            released_at=dt.datetime(2026, 3, 10),
        )
        assert milestone.payment_status == PaymentStatus.RELEASED

    def test_blank_currency_means_project_currency(self):
        milestone = Milestone(id="m-1", project_id="p-1", title="D", amount="1", currency=" ")

        assert milestone.currency is None
        assert milestone.effective_currency("EUR") == "EUR"

    def test_own_currency_wins(self):
        milestone = Milestone(id="m-1", project_id="p-1", title="D", amount="1", currency="gbp")
        assert milestone.effective_currency("USD") == "GBP"

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Milestone(id="m-1", project_id="p-1", title="D", amount="-1")

    def test_aware_timestamps_normalized_to_naive_utc(self):
        milestone = Milestone(
            id="m-1",
            project_id="p-1",
            title="Design",
            amount="500",
            payment_status="RELEASED",
            released_at="2026-03-05T10:00:00Z",
            created_at="2026-01-05T09:00:00+02:00",
        )

        assert milestone.released_at == dt.datetime(2026, 3, 5, 10, 0)
        assert milestone.released_at.tzinfo is None
        assert milestone.created_at == dt.datetime(2026, 1, 5, 7, 0)

    def test_aware_assignment_normalized(self):
        milestone = Milestone(id="m-1", project_id="p-1", title="D", amount="1")
        milestone.released_at = dt.datetime(2026, 3, 5, 10, 0, tzinfo=dt.timezone.utc)

        assert milestone.released_at == dt.datetime(2026, 3, 5, 10, 0)


class TestLedgerTransaction:
    """Test LedgerTransaction model."""

    def test_description(self):
        tx = LedgerTransaction(
            milestone_id="m-1",
            title="Design",
            gross_amount=Decimal("500"),
            currency="USD",
            project_id="p-1",
            project_name="Storefront",
        )
        assert tx.description == "Milestone payment: Design for Storefront"
