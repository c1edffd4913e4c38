"""Services for the finance engine.

This package contains:
- InMemoryFinanceStore: Indexed store over a finance snapshot
- LedgerWriter, InMemoryLedger: Ledger collaborator written on release
- MilestoneService: Milestone commands and the release transition
- AccountsService: Report composers
"""

from agency_finance.services.accounts_service import AccountsService
from agency_finance.services.finance_store import InMemoryFinanceStore
from agency_finance.services.ledger_service import InMemoryLedger, LedgerWriter
from agency_finance.services.milestone_service import (
    LedgerStatus,
    MilestoneService,
    MilestoneUpdateResult,
)

__all__ = [
    "AccountsService",
    "InMemoryFinanceStore",
    "InMemoryLedger",
    "LedgerStatus",
    "LedgerWriter",
    "MilestoneService",
    "MilestoneUpdateResult",
]
