"""Milestone commands and the release transition.

All milestone status changes go through ``MilestoneService.update_milestone``:
it translates the UI vocabulary ("released" / "pending") into workflow
statuses and, when a milestone first becomes COMPLETED, stamps the release
time and writes one transaction to the ledger collaborator.

The ledger write is best-effort and at-most-once. A ledger failure is logged
and reported in the returned ``MilestoneUpdateResult``; the milestone update
itself is kept.
"""

import datetime as dt
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from agency_finance.exceptions import LedgerWriteError, NotFoundError, ValidationError
from agency_finance.models.base import utc_now
from agency_finance.models.milestone import (
    LedgerTransaction,
    Milestone,
    MilestoneStatus,
    PaymentStatus,
    parse_workflow_status,
)
from agency_finance.services.finance_store import InMemoryFinanceStore
from agency_finance.services.ledger_service import LedgerWriter
from agency_finance.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "project_id",
    "title",
    "description",
    "amount",
    "currency",
    "status",
    "payment_status",
    "due_date",
}


class LedgerStatus(Enum):
    """Outcome of the ledger side effect of a milestone update."""

    NOT_TRIGGERED = "not_triggered"
    RECORDED = "recorded"
    FAILED = "failed"


@dataclass
class MilestoneUpdateResult:
    """Updated milestone plus the outcome of the ledger write.

    Attributes:
        milestone: The persisted milestone
        ledger_status: Whether a ledger write happened and succeeded
        transaction: The ledger transaction when recorded
        ledger_error: Failure message when the ledger write failed
    """

    milestone: Milestone
    ledger_status: LedgerStatus = LedgerStatus.NOT_TRIGGERED
    transaction: Optional[LedgerTransaction] = None
    ledger_error: Optional[str] = None

    @property
    def ledger_in_sync(self) -> bool:
        """False when the milestone was released but the ledger missed it."""
        return self.ledger_status != LedgerStatus.FAILED


class MilestoneService:
    """Creates, updates and deletes milestones.

    Attributes:
        store: Persistence collaborator
        ledger: Ledger collaborator written on release
        clock: Source of the current time (naive UTC)

    Example:
        >>> service = MilestoneService(store, InMemoryLedger())
        >>> result = service.update_milestone("m-1", status="released")
        >>> result.milestone.status
        <MilestoneStatus.COMPLETED: 'COMPLETED'>
        >>> result.ledger_status
        <LedgerStatus.RECORDED: 'recorded'>
    """

    def __init__(
        self,
        store: InMemoryFinanceStore,
        ledger: LedgerWriter,
        clock: Callable[[], dt.datetime] = utc_now,
    ):
        self.store = store
        self.ledger = ledger
        self.clock = clock

    def _require_milestone(self, milestone_id: str) -> Milestone:
        milestone = self.store.get_milestone(milestone_id)
        if milestone is None:
            raise NotFoundError("Milestone", milestone_id)
        return milestone

    def _require_project(self, project_id: str):
        project = self.store.get_project(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def create_milestone(
        self,
        project_id: str,
        title: str,
        amount: Any,
        description: Optional[str] = None,
        currency: Optional[str] = None,
        due_date: Optional[dt.date] = None,
    ) -> Milestone:
        """Create a pending milestone on a project.

        Args:
            project_id: Owning project
            title: Milestone title
            amount: Gross amount
            description: Optional description
            currency: Milestone currency (defaults to the project's currency)
            due_date: Optional due date

        Returns:
            The persisted milestone

        Raises:
            NotFoundError: If the project does not exist
            ValidationError: If the values are invalid
        """
        self._require_project(project_id)
        try:
            milestone = Milestone(
                id=str(uuid.uuid4()),
                project_id=project_id,
                title=title,
                description=description,
                amount=amount,
                currency=currency,
                due_date=due_date,
                created_at=self.clock(),
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid milestone: {e}")

        self.store.save_milestone(milestone)
        logger.info(f"Created milestone {milestone.id} on project {project_id}")
        return milestone

    def update_milestone(self, milestone_id: str, **changes: Any) -> MilestoneUpdateResult:
        """Apply a partial update to a milestone.

        ``status`` accepts workflow status names and the synonyms
        "released" / "pending" (any case). The first transition into
        COMPLETED writes one ledger transaction and stamps ``released_at``,
        unless the payment is already RELEASED: then the existing
        ``released_at`` is kept so the revenue stays in the month it was
        released.

        ``payment_status`` moving to RELEASED stamps ``released_at`` if the
        payment was not already released; moving away from RELEASED clears it.

        Args:
            milestone_id: Milestone to update
            **changes: Fields to change (see UPDATABLE_FIELDS)

        Returns:
            MilestoneUpdateResult with the persisted milestone and ledger outcome

        Raises:
            NotFoundError: If the milestone or a new project does not exist
            ValidationError: If a field or value is invalid
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update milestone fields: {sorted(unknown)}")

        current = self._require_milestone(milestone_id)
        updates: Dict[str, Any] = dict(changes)
        now = self.clock()

        if "project_id" in updates:
            self._require_project(updates["project_id"])

        if "status" in updates:
            try:
                updates["status"] = parse_workflow_status(updates["status"])
            except ValueError as e:
                raise ValidationError(str(e))

        if "payment_status" in updates:
            try:
                payment = PaymentStatus(str(updates["payment_status"]).strip().upper())
            except ValueError:
                raise ValidationError(
                    f"Unknown payment status '{updates['payment_status']}'. "
                    f"Must be one of: {[s.value for s in PaymentStatus]}"
                )
            updates["payment_status"] = payment
            if payment == PaymentStatus.RELEASED:
                if current.payment_status != PaymentStatus.RELEASED:
                    updates["released_at"] = now
            elif current.payment_status == PaymentStatus.RELEASED:
                updates["released_at"] = None

        released_now = (
            updates.get("status") == MilestoneStatus.COMPLETED
            and current.status != MilestoneStatus.COMPLETED
        )
        if released_now and "released_at" not in updates:
            if current.payment_status != PaymentStatus.RELEASED:
                updates["released_at"] = now

        try:
            updated = Milestone.model_validate({**current.model_dump(), **updates})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid milestone update: {e}")

        self.store.save_milestone(updated)
        logger.info(f"Updated milestone {milestone_id}: {sorted(changes)}")

        result = MilestoneUpdateResult(milestone=updated)
        if released_now:
            self._record_release(updated, result)
        return result

    def _record_release(self, milestone: Milestone, result: MilestoneUpdateResult) -> None:
        """Write the release to the ledger; failures are logged, not raised."""
        with LogContext(milestone_id=milestone.id, project_id=milestone.project_id):
            try:
                project = self.store.get_project(milestone.project_id)
                if project is None:
                    raise LedgerWriteError(
                        f"Project {milestone.project_id} of milestone "
                        f"{milestone.id} is missing"
                    )
                client = self.store.get_client(project.client_id)
                result.transaction = self.ledger.record_milestone_release(
                    milestone_id=milestone.id,
                    title=milestone.title,
                    gross_amount=milestone.amount,
                    currency=milestone.effective_currency(project.currency),
                    project_id=project.id,
                    project_name=project.name,
                    client_name=client.name if client else None,
                    platform_fee_percent=project.platform_fee_percent or Decimal("0"),
                )
                result.ledger_status = LedgerStatus.RECORDED
            except Exception as e:
                result.ledger_status = LedgerStatus.FAILED
                result.ledger_error = str(e)
                logger.error(
                    f"Error creating ledger transaction for released milestone "
                    f"{milestone.id}: {type(e).__name__}: {e}"
                )

    def delete_milestone(self, milestone_id: str) -> Milestone:
        """Delete a milestone.

        Raises:
            NotFoundError: If the milestone does not exist
        """
        deleted = self.store.delete_milestone(milestone_id)
        if deleted is None:
            raise NotFoundError("Milestone", milestone_id)
        logger.info(f"Deleted milestone {milestone_id}")
        return deleted
