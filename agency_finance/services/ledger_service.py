"""Ledger collaborator interface and an in-memory implementation.

The engine writes exactly one ledger transaction per milestone release and
never reads the ledger back for reporting.
"""

import datetime as dt
import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from agency_finance.calculators.platform_fee import apply_platform_fee
from agency_finance.exceptions import LedgerWriteError
from agency_finance.models.base import utc_now
from agency_finance.models.milestone import LedgerTransaction

logger = logging.getLogger(__name__)


class LedgerWriter(ABC):
    """Interface of the external ledger collaborator."""

    @abstractmethod
    def record_milestone_release(
        self,
        *,
        milestone_id: str,
        title: str,
        gross_amount: Decimal,
        currency: str,
        project_id: str,
        project_name: str,
        client_name: Optional[str],
        platform_fee_percent: Decimal,
    ) -> LedgerTransaction:
        """Record a released milestone.

        Raises:
            LedgerWriteError: If the transaction could not be written
        """


class InMemoryLedger(LedgerWriter):
    """Ledger kept in process memory.

    Recording the same milestone twice returns the existing transaction.

    Example:
        >>> ledger = InMemoryLedger()
        >>> tx = ledger.record_milestone_release(
        ...     milestone_id="m-1", title="Design", gross_amount=Decimal("500"),
        ...     currency="USD", project_id="p-1", project_name="Storefront",
        ...     client_name="Acme", platform_fee_percent=Decimal("10"))
        >>> tx.net_amount
        Decimal('450.0')
    """

    def __init__(self, clock: Callable[[], dt.datetime] = utc_now):
        self._clock = clock
        self._transactions: Dict[str, LedgerTransaction] = OrderedDict()
        self._lock = threading.Lock()

    def record_milestone_release(
        self,
        *,
        milestone_id: str,
        title: str,
        gross_amount: Decimal,
        currency: str,
        project_id: str,
        project_name: str,
        client_name: Optional[str],
        platform_fee_percent: Decimal,
    ) -> LedgerTransaction:
        with self._lock:
            existing = self._transactions.get(milestone_id)
            if existing is not None:
                logger.info(f"Ledger already holds a transaction for milestone {milestone_id}")
                return existing

            fee = apply_platform_fee(gross_amount, platform_fee_percent)
            try:
                transaction = LedgerTransaction(
                    milestone_id=milestone_id,
                    title=title,
                    gross_amount=gross_amount,
                    currency=currency,
                    project_id=project_id,
                    project_name=project_name,
                    client_name=client_name,
                    platform_fee_percent=platform_fee_percent,
                    fee_amount=fee.fee_amount,
                    net_amount=fee.net_amount,
                    recorded_at=self._clock(),
                )
            except ValueError as e:
                raise LedgerWriteError(f"Invalid ledger transaction: {e}")

            self._transactions[milestone_id] = transaction
            logger.info(
                f"Recorded ledger transaction for milestone {milestone_id}: "
                f"{gross_amount} {currency} gross, {fee.net_amount} net"
            )
            return transaction

    @property
    def transactions(self) -> List[LedgerTransaction]:
        with self._lock:
            return list(self._transactions.values())

    def get(self, milestone_id: str) -> Optional[LedgerTransaction]:
        with self._lock:
            return self._transactions.get(milestone_id)
