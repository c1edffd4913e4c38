"""Exception hierarchy for the finance engine.

- NotFoundError: a requested project, worker or milestone does not exist
- ValidationError: a command carried an invalid value
- LedgerWriteError: the external ledger collaborator failed

Missing financial configuration (salary, budget, rate) is not an error;
it propagates as None or 0 through the calculations.
"""

from typing import Optional


class FinanceEngineError(Exception):
    """Base exception with a user-facing message and optional hint."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize the error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class NotFoundError(FinanceEngineError):
    """A primary entity of a query or command does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} not found: {entity_id}",
            recovery_hint=f"Check that the {entity.lower()} id is correct",
        )


class ValidationError(FinanceEngineError):
    """A command was given a value the engine cannot accept."""

    pass


class LedgerWriteError(FinanceEngineError):
    """The ledger collaborator could not record a transaction."""

    pass
