"""Unit tests for budget tracking."""

from decimal import Decimal

import pytest

from agency_finance.calculators.budget_tracker import BudgetTracker
from agency_finance.calculators.currency import CurrencyNormalizer
from agency_finance.models.project import Project


@pytest.fixture
def tracker():
    return BudgetTracker(CurrencyNormalizer())


def make_project(**overrides):
    data = {"id": "p-1", "name": "Storefront", "client_id": "c-1", "currency": "USD"}
    data.update(overrides)
    return Project(**data)


class TestProjectBudgetView:
    """Test the project-level budget view."""

    def test_payable_amount_after_fee(self, tracker):
        project = make_project(budget="1000", platform_fee_percent="10")

        view = tracker.project_budget_view(project)

        assert view.platform_fee_amount == Decimal("100")
        assert view.payable_amount == Decimal("900")
        assert view.payable_amount_base == Decimal("252000")
        assert view.exchange_rate == Decimal("280")
        assert view.budget_base == Decimal("280000")

    def test_working_budget_converted_at_custom_rate(self, tracker):
        project = make_project(budget="1000", working_budget="500", exchange_rate="300")

        view = tracker.project_budget_view(project)

        assert view.working_budget_base == Decimal("150000")
        assert view.reference_budget == Decimal("150000")

    def test_no_budget(self, tracker):
        view = tracker.project_budget_view(make_project())

        assert view.payable_amount is None
        assert view.budget_base is None
        assert view.reference_budget is None


class TestConsumption:
    """Test cost against reference budget."""

    def test_working_budget_has_priority(self, tracker):
        project = make_project(budget="1000", platform_fee_percent="10", working_budget="100")

        result = tracker.consumption(Decimal("14000"), project)

        assert result.reference_budget == Decimal("28000")
        assert result.consumed_percent == Decimal("50")
        assert result.remaining == Decimal("14000")
        assert result.is_over_budget is False

    def test_payable_amount_used_without_working_budget(self, tracker):
        project = make_project(budget="1000", platform_fee_percent="10")

        result = tracker.consumption(Decimal("0"), project)

        assert result.reference_budget == Decimal("252000")

    def test_over_budget(self, tracker):
        project = make_project(budget="10")

        result = tracker.consumption(Decimal("3000"), project)

        assert result.reference_budget == Decimal("2800")
        assert result.remaining == Decimal("-200")
        assert result.is_over_budget is True

    def test_zero_working_budget_is_still_a_reference(self, tracker):
        project = make_project(budget="1000", working_budget="0")

        result = tracker.consumption(Decimal("100"), project)

        assert result.reference_budget == Decimal("0")
        assert result.consumed_percent == Decimal("0")
        assert result.is_over_budget is True

    def test_no_reference_budget(self, tracker):
        result = tracker.consumption(Decimal("5000"), make_project())

        assert result.reference_budget is None
        assert result.consumed_percent == Decimal("0")
        assert result.remaining == Decimal("0")
        assert result.is_over_budget is False
