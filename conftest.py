"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
import os
from decimal import Decimal
from typing import Any, Dict

import pytest

from agency_finance.config import FinanceEngineConfig, reload_config
from agency_finance.models import FinanceSnapshot
from agency_finance.services import (
    AccountsService,
    InMemoryFinanceStore,
    InMemoryLedger,
    MilestoneService,
)

# Fixed instants used by the fixtures below
FIXED_NOW = dt.datetime(2026, 3, 20, 12, 0)
FIXED_TODAY = FIXED_NOW.date()


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'BASE_CURRENCY': 'PKR',
        'FALLBACK_EXCHANGE_RATE': '280',
        'TREND_MONTHS': '6',
        'TREND_MAX_WORKERS': '1',
        'ENVIRONMENT': 'testing',
        'DEBUG': 'true',
        'LOG_LEVEL': 'DEBUG'
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv('CURRENCY_RATES', raising=False)
    monkeypatch.delenv('SNAPSHOT_FILE', raising=False)

    # Clear the global config to force reload with test values
    import agency_finance.config.settings
    agency_finance.config.settings._config = None

    yield test_env_vars

    # Clean up
    agency_finance.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> FinanceEngineConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def snapshot_data() -> Dict[str, Any]:
    """Raw snapshot with two active projects and one archived project.

    Hourly rates: Ada 1000, Quinn 500, Pat 2000, Frank 0 (no salary).
    """
    return {
        'workers': [
            {'id': 'w-dev', 'first_name': 'Ada', 'last_name': 'Malik', 'email': 'ada@agency.test',
             'role': 'DEVELOPER', 'monthly_salary': '176000'},
            {'id': 'w-qc', 'first_name': 'Quinn', 'last_name': 'Shah',
             'role': 'QC', 'monthly_salary': '88000'},
            {'id': 'w-pm', 'first_name': 'Pat', 'last_name': 'Rana',
             'role': 'PROJECT_MANAGER', 'monthly_salary': '352000'},
            {'id': 'w-free', 'first_name': 'Frank', 'last_name': 'Iqbal',
             'role': 'DESIGNER', 'employment_kind': 'FREELANCER'},
            {'id': 'w-old', 'first_name': 'Ina', 'last_name': 'Butt',
             'role': 'DEVELOPER', 'monthly_salary': '176000', 'is_active': False},
        ],
        'clients': [
            {'id': 'c-1', 'name': 'Acme', 'client_kind': 'DIRECT'},
        ],
        'projects': [
            {'id': 'p-1', 'name': 'Storefront', 'currency': 'USD', 'budget': '1000',
             'platform_fee_percent': '10', 'client_id': 'c-1',
             'members': [
                 {'worker_id': 'w-dev', 'role': 'DEVELOPER'},
                 {'worker_id': 'w-qc', 'role': 'QC'},
                 {'worker_id': 'w-free', 'role': 'DESIGNER'},
             ]},
            {'id': 'p-2', 'name': 'Mobile App', 'currency': 'EUR', 'exchange_rate': '300',
             'client_id': 'c-1', 'members': [{'worker_id': 'w-dev', 'role': 'DEVELOPER'}]},
            {'id': 'p-3', 'name': 'Archive', 'currency': 'PKR', 'budget': '50000',
             'client_id': 'c-1', 'is_active': False},
        ],
        'tasks': [
            {'id': 't-1', 'project_id': 'p-1', 'title': 'Checkout', 'status': 'COMPLETED',
             'estimated_hours': '2', 'assignee_id': 'w-dev'},
            {'id': 't-2', 'project_id': 'p-1', 'title': 'QA pass', 'status': 'IN_PROGRESS',
             'estimated_hours': '1', 'assignee_id': 'w-qc'},
            {'id': 't-3', 'project_id': 'p-1', 'title': 'Logo', 'status': 'TODO',
             'assignee_id': 'w-free'},
            {'id': 't-4', 'project_id': 'p-2', 'title': 'Login', 'status': 'IN_REVIEW',
             'estimated_hours': '4', 'assignee_id': 'w-dev'},
        ],
        'time_entries': [
            {'id': 'e-1', 'task_id': 't-1', 'worker_id': 'w-dev',
             'start_time': '2026-03-02T09:00:00', 'duration_seconds': 10800},
            {'id': 'e-2', 'task_id': 't-2', 'worker_id': 'w-qc',
             'start_time': '2026-03-03T10:00:00', 'duration_seconds': 7200,
             'is_billable': False},
            {'id': 'e-3', 'task_id': 't-3', 'worker_id': 'w-free',
             'start_time': '2026-02-10T11:00:00', 'duration_seconds': 3600},
            {'id': 'e-4', 'task_id': 't-1', 'worker_id': 'w-ghost',
             'start_time': '2026-03-04T14:00:00', 'duration_seconds': 1800},
            {'id': 'e-5', 'task_id': 't-4', 'worker_id': 'w-dev',
             'start_time': '2026-03-05T09:00:00', 'duration_seconds': 7200},
        ],
        'milestones': [
            {'id': 'm-1', 'project_id': 'p-1', 'title': 'Design', 'amount': '500',
             'status': 'COMPLETED', 'payment_status': 'RELEASED',
             'released_at': '2026-03-10T15:00:00', 'created_at': '2026-01-05T09:00:00'},
            {'id': 'm-2', 'project_id': 'p-1', 'title': 'Build', 'amount': '300',
             'created_at': '2026-01-06T09:00:00'},
            {'id': 'm-3', 'project_id': 'p-1', 'title': 'Extras', 'amount': '200',
             'status': 'CANCELLED', 'payment_status': 'CANCELLED',
             'created_at': '2026-01-07T09:00:00'},
            {'id': 'm-4', 'project_id': 'p-2', 'title': 'Kickoff', 'amount': '100',
             'status': 'IN_PROGRESS', 'payment_status': 'RELEASED',
             'released_at': '2026-02-15T10:00:00', 'created_at': '2026-01-08T09:00:00'},
        ],
    }


@pytest.fixture
def snapshot(snapshot_data) -> FinanceSnapshot:
    """Validated snapshot built from snapshot_data."""
    return FinanceSnapshot.model_validate(snapshot_data)


@pytest.fixture
def store(snapshot) -> InMemoryFinanceStore:
    """In-memory store over the sample snapshot."""
    return InMemoryFinanceStore(snapshot)


@pytest.fixture
def accounts_service(store) -> AccountsService:
    """Accounts service with default rates and a fixed date."""
    return AccountsService(store, today=lambda: FIXED_TODAY)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """In-memory ledger with a fixed clock."""
    return InMemoryLedger(clock=lambda: FIXED_NOW)


@pytest.fixture
def milestone_service(store, ledger) -> MilestoneService:
    """Milestone service with a fixed clock."""
    return MilestoneService(store, ledger, clock=lambda: FIXED_NOW)


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data) -> str:
    """Sample snapshot written to a JSON file."""
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps(snapshot_data), encoding='utf-8')
    return str(path)


@pytest.fixture
def one_unit_per_hour() -> Decimal:
    """Monthly salary whose hourly rate is exactly one base unit."""
    return Decimal('176')


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fixed_now() -> dt.datetime:
    """Clock value used by the service fixtures."""
    return FIXED_NOW


@pytest.fixture
def fixed_today() -> dt.date:
    """Date used by the accounts service fixture."""
    return FIXED_TODAY
